"""
CodeBuild buildspec generation for the SPA Hosting Kit.

The buildspec is a read-only projection of the hosting configuration: one
install command, one build command and an artifact rule covering everything
under the build output directory. It is computed fresh on every call.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Tuple

import yaml

from spa_hosting_kit.configs.hosting_cfg import HostingCfg

BUILDSPEC_VERSION = "0.2"
# Node.js 20 LTS, shipped with the standard 7.0 build image
NODEJS_RUNTIME_VERSION = "20"
ARTIFACT_FILES = ("**/*",)


@dataclass(frozen=True)
class BuildPhase:
    """
    A single buildspec phase.

    Attributes:
        commands: Commands run in order
        runtime_versions: Runtimes the phase installs, e.g. (("nodejs", "20"),)
    """
    commands: Tuple[str, ...]
    runtime_versions: Tuple[Tuple[str, str], ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.runtime_versions:
            out["runtime-versions"] = dict(self.runtime_versions)
        out["commands"] = list(self.commands)
        return out


@dataclass(frozen=True)
class BuildArtifacts:
    files: Tuple[str, ...]
    base_directory: str

    def to_dict(self) -> Dict[str, Any]:
        return {"files": list(self.files), "base-directory": self.base_directory}


@dataclass(frozen=True)
class BuildSpec:
    """
    CodeBuild build specification.

    Attributes:
        install: Install phase
        build: Build phase
        artifacts: Artifact rule (file globs + base directory)
        version: Buildspec format version
    """
    install: BuildPhase
    build: BuildPhase
    artifacts: BuildArtifacts
    version: str = BUILDSPEC_VERSION

    def to_dict(self) -> Dict[str, Any]:
        """
        Render the document CodeBuild consumes.

        Returns:
            Buildspec as a plain dict (suitable for codebuild.BuildSpec.from_object)
        """
        return {
            "version": self.version,
            "phases": {
                "install": self.install.to_dict(),
                "build": self.build.to_dict(),
            },
            "artifacts": self.artifacts.to_dict(),
        }

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False, default_flow_style=False)


class BuildSpecGenerator:
    """
    Derives the CodeBuild buildspec from a hosting configuration.
    """

    @staticmethod
    def generate(cfg: HostingCfg) -> BuildSpec:
        """
        Generate a buildspec from configuration.

        Args:
            cfg: Hosting configuration (defaults already applied)

        Returns:
            BuildSpec instance
        """
        return BuildSpec(
            install=BuildPhase(
                commands=(cfg.build.install_command,),
                runtime_versions=(("nodejs", NODEJS_RUNTIME_VERSION),),
            ),
            build=BuildPhase(commands=(cfg.build.build_command,)),
            artifacts=BuildArtifacts(
                files=ARTIFACT_FILES,
                base_directory=cfg.build.output_directory,
            ),
        )
