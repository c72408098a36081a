"""Exceptions raised while inspecting a schema and reporting the check run."""


class GraphQLChecksError(Exception):
    """Base class for all errors that end a run in a failed state."""


class ConfigurationError(GraphQLChecksError):
    """A required input or environment variable is missing or invalid."""


class SchemaLoadError(GraphQLChecksError):
    """One of the two schema versions could not be loaded or built."""


class GitHubAPIError(GraphQLChecksError):
    """The GitHub GraphQL API answered with errors instead of data."""


class AnnotationDeliveryError(GraphQLChecksError):
    """Sending annotations failed after the check run was already concluded."""


class GitError(GraphQLChecksError):
    """The checked out commit could not be resolved with git."""
