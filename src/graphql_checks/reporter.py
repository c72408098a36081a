"""Conclude a check run and attach its annotations in API-sized batches."""

import logging
from typing import Any, Protocol

from requests import RequestException

from graphql_checks.errors import AnnotationDeliveryError
from graphql_checks.github_api import gen_github_timestamp
from graphql_checks.models import CheckRunConclusion, CheckRunOutput
from graphql_checks.utils import batch

logger = logging.getLogger(__name__)

# GitHub accepts at most 50 annotations per check run update
ANNOTATIONS_PER_REQUEST = 50


class CheckRunUpdater(Protocol):
    """Anything able to apply partial updates to a check run, see GitHubChecks."""

    def update_check_run(self, check_run_id: str, payload: dict[str, Any]) -> None:
        """Apply ``payload`` to the check run ``check_run_id``."""


def resolve_conclusion(
    conclusion: CheckRunConclusion,
    *,
    fail_on_breaking: bool,
    has_approval_label: bool,
) -> CheckRunConclusion:
    """Turn a failing diff into a success if breaking changes are allowed.

    Breaking changes are allowed when they are configured not to fail the check, or
    when a maintainer approved them by labelling the pull request. Any other
    conclusion is returned as is.
    """
    if conclusion == CheckRunConclusion.FAILURE and (
        not fail_on_breaking or has_approval_label
    ):
        return CheckRunConclusion.SUCCESS
    return conclusion


def report_check_run(
    checks: CheckRunUpdater,
    check_run_id: str,
    conclusion: CheckRunConclusion,
    output: CheckRunOutput,
) -> CheckRunConclusion:
    """Complete the check run, then send its annotations.

    The conclusion, title and summary are set first, in a single update. The
    annotations follow in batches of ``ANNOTATIONS_PER_REQUEST``, one update each; an
    empty list still results in one (empty) annotation update.

    :param checks: client used to update the check run
    :param check_run_id: ID of the check run to complete
    :param conclusion: the final conclusion, already resolved
    :param output: title, summary and annotations of the check run
    :return: the conclusion that was reported
    :raises RequestException: if completing the check run failed
    :raises AnnotationDeliveryError: if any batch of annotations could not be sent,
        the check run then keeps its conclusion but lacks (some) annotations
    """
    logger.info("[graphql-checks] Updating check: %s", check_run_id)
    logger.info(
        "[graphql-checks] Annotations to be sent: %d",
        len(output.annotations),
    )

    checks.update_check_run(
        check_run_id,
        {
            "status": "completed",
            "completed_at": gen_github_timestamp(),
            "conclusion": conclusion.value,
            "output": {"title": output.title, "summary": output.summary},
        },
    )

    for annotations in batch(output.annotations, ANNOTATIONS_PER_REQUEST):
        try:
            checks.update_check_run(
                check_run_id,
                {
                    "output": {
                        "title": output.title,
                        "summary": output.summary,
                        "annotations": [
                            annotation.model_dump(mode="json", exclude_none=True)
                            for annotation in annotations
                        ],
                    },
                },
            )
        except RequestException as exc:
            logger.exception("[graphql-checks] Failed to send annotations")
            msg = f"Failed to send annotations to check run {check_run_id}: {exc}"
            raise AnnotationDeliveryError(msg) from exc
        logger.info("[graphql-checks] Annotations sent (%d)", len(annotations))

    return conclusion
