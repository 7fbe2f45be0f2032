"""Workflow stage components.

Each component owns one step of the deployment sequence and raises a
``DeployError`` subclass on failure::

    ConfigResolver        -> config_resolved
    PreconditionChecker   -> preconditions_checked
    BuildInvoker          -> built
    PublishInvoker        -> published

``VerificationRequester`` and ``StatusChecker`` back the standalone
verification and status commands.
"""

from __future__ import annotations

from deployforge.stages.build import BuildInvoker
from deployforge.stages.config_resolver import ConfigResolver
from deployforge.stages.preconditions import PreconditionChecker
from deployforge.stages.publish import PublishInvoker, PublishMode
from deployforge.stages.status import StatusChecker
from deployforge.stages.verification import VerificationRequester

__all__ = [
    "BuildInvoker",
    "ConfigResolver",
    "PreconditionChecker",
    "PublishInvoker",
    "PublishMode",
    "StatusChecker",
    "VerificationRequester",
]
