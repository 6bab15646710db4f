"""
CLI Verify Command

Verify a built plan offline by re-deriving every commitment from the init
code it carries:
- initCodeHash, prefix and leafHash of every leaf
- every proof folds to the published root
- leaves are sorted and successor pointers form a cycle
- the root matches a freshly built tree

Usage:
    create4-plan verify --plan plan.json [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace

from pydantic import ValidationError

from create4.plan.builder import PlanVerificationReport, verify_plan
from create4.schemas.errors import PlanValidationException
from create4.schemas.plan import DeploymentPlan

from .common import (
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    read_json_file,
    require_option,
)


logger = logging.getLogger(__name__)


def load_plan(path: str) -> DeploymentPlan:
    data = read_json_file(path)
    if not isinstance(data, dict):
        raise PlanValidationException("Plan file must contain a JSON object")
    try:
        return DeploymentPlan.model_validate(data)
    except ValidationError as e:
        raise PlanValidationException(
            f"Invalid plan file: {e.error_count()} error(s)",
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e


def print_report_human(path: str, report: PlanVerificationReport) -> None:
    print(f"plan: {path}")
    print(f"root: {report.root}")
    print(f"leaves_checked: {report.checked_leaves}")
    print(f"ok: {str(report.ok).lower()}")
    if report.errors:
        print(f"\nerrors ({len(report.errors)}):")
        for err in report.errors:
            print(f"  ✗ {err}")


def verify_cmd(args: Namespace) -> int:
    path = require_option(args, "plan", "Missing required --plan parameter")
    plan = load_plan(path)
    report = verify_plan(plan)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print_report_human(path, report)

    if report.ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
