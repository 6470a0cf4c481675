"""Copy and install engine for registry entries."""

from .dependencies import conflicts, decide, load_manifest, reconcile
from .fetcher import Fetcher, GitFetcher
from .filesystem import FileSystem, LocalFileSystem
from .models import (
    CopyPlan,
    CopyReport,
    DependencyDecision,
    EntryResult,
    ManifestView,
)
from .orchestration import Collaborators, CopyOrchestrator
from .package_manager import (
    PackageInstaller,
    ShellPackageInstaller,
    build_add_command,
    detect_package_manager,
    get_package_manager,
)
from .placement import looks_like_file, materialize, resolve_copy_plan

__all__ = [
    "ManifestView",
    "DependencyDecision",
    "CopyPlan",
    "EntryResult",
    "CopyReport",
    "load_manifest",
    "decide",
    "reconcile",
    "conflicts",
    "Fetcher",
    "GitFetcher",
    "FileSystem",
    "LocalFileSystem",
    "looks_like_file",
    "resolve_copy_plan",
    "materialize",
    "PackageInstaller",
    "ShellPackageInstaller",
    "build_add_command",
    "detect_package_manager",
    "get_package_manager",
    "Collaborators",
    "CopyOrchestrator",
]
