"""Report GraphQL schema changes as GitHub check runs."""
