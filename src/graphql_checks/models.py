"""Model representation of GitHub checks specific dictionary/json structures."""

from enum import Enum, StrEnum

from pydantic import BaseModel


class CheckRunConclusion(StrEnum):
    """The valid conclusion states of a check run."""

    SUCCESS = "success"
    FAILURE = "failure"
    NEUTRAL = "neutral"
    CANCELLED = "cancelled"
    SKIPPED = "skipped"
    TIMED_OUT = "timed_out"
    ACTION_REQUIRED = "action_required"


class AnnotationLevel(StrEnum):
    """The severity levels permitted by GitHub checks for each individual annotation."""

    NOTICE = "notice"
    WARNING = "warning"
    FAILURE = "failure"


class CheckAnnotation(BaseModel):
    """Models the json expected by GitHub checks for each individual annotation."""

    path: str
    start_line: int
    end_line: int
    annotation_level: AnnotationLevel
    message: str
    title: str | None = None
    raw_details: str | None = None
    start_column: int | None = None
    end_column: int | None = None


class CheckRunOutput(BaseModel):
    """The json format expected for the output of a Checks run."""

    title: str
    summary: str
    annotations: list[CheckAnnotation] = []


class RepoContext(BaseModel):
    """Owner and name of the repository a check run belongs to."""

    owner: str
    repo: str

    @classmethod
    def from_slug(cls, slug: str) -> "RepoContext":
        """Parse an ``owner/repo`` slug, as found in ``GITHUB_REPOSITORY``."""
        owner, _, repo = slug.partition("/")
        if not owner or not repo:
            msg = f"Invalid repository slug '{slug}', expected 'owner/repo'."
            raise ValueError(msg)
        return cls(owner=owner, repo=repo)


class ChangeCriticality(Enum):
    """How a schema change affects existing consumers of the schema."""

    BREAKING = "breaking"
    DANGEROUS = "dangerous"
    SAFE = "safe"

    def to_annotation_level(self) -> AnnotationLevel:
        """Map the criticality onto the annotation level shown on GitHub."""
        if self == ChangeCriticality.BREAKING:
            return AnnotationLevel.FAILURE
        if self == ChangeCriticality.DANGEROUS:
            return AnnotationLevel.WARNING
        return AnnotationLevel.NOTICE


class SchemaChange(BaseModel):
    """A single change between two schema versions."""

    criticality: ChangeCriticality
    type: str
    message: str


class SchemaDiff(BaseModel):
    """Result of comparing two schema versions."""

    conclusion: CheckRunConclusion
    changes: list[SchemaChange] = []
    annotations: list[CheckAnnotation] = []
