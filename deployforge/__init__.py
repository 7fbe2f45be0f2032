"""deployforge: fail-fast deploy, upgrade and source verification of on-chain programs.

Workflow:
  - Config resolution with a pinned deployer identity
  - Precondition checks (balance advisory, program state for upgrades)
  - Standard, reproducible or containerised builds with SHA-256 digest
  - Publish through the chain CLI with a mandatory on-chain read-back
  - Source verification requests against the attestation service
"""

__version__ = "0.2.0"
__description__ = (
    "Fail-fast deploy, upgrade and source-verification workflow for on-chain programs"
)

from deployforge.core.orchestrator import Orchestrator

__all__ = ["Orchestrator", "__version__"]
