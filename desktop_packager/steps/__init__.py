from .step_10_preflight import PreflightStep
from .step_20_resolve_jdk import ResolveJdkStep
from .step_30_fetch_jdk import FetchJdkStep
from .step_40_stage_jar import StageJarStep
from .step_50_package_installers import PackageInstallersStep
from .step_60_collect_artifacts import CollectArtifactsStep
from .step_70_share_artifacts import ShareArtifactsStep

__all__ = [
    "PreflightStep",
    "ResolveJdkStep",
    "FetchJdkStep",
    "StageJarStep",
    "PackageInstallersStep",
    "CollectArtifactsStep",
    "ShareArtifactsStep",
]
