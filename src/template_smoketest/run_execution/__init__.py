"""Run execution domain exports."""

from .run_contracts import RunOutcome, RunRequest
from .smoketest_run_use_case import TemplateSmoketest, execute_template_smoketest, new_run_id

__all__ = [
    "RunRequest",
    "RunOutcome",
    "TemplateSmoketest",
    "execute_template_smoketest",
    "new_run_id",
]
