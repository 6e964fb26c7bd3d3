"""
Export driver: containers -> states -> directions/frames -> artifacts on disk.

Files are processed strictly in sequence. A container that fails to parse is
reported and skipped; a single artifact that fails to write is reported and
every remaining artifact is still attempted.
"""

from __future__ import annotations

import contextlib
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from ..config import ANIMATION_LOOP, ExportConfig
from ..core.errors import ContainerFormatError, DmiExtractError, OutputRootError
from ..core.model import Container, State
from ..core.planning import PlannedArtifact, plan_animated_paths, plan_still_paths
from ..output.logger import SimpleLogger
from ..utils.path import container_base_name
from .animation import assemble
from .container import read_container
from .image import ArtifactWriter

ContainerReader = Callable[[Path], Container]


@dataclass(frozen=True)
class ArtifactFailure:
    """An artifact that could not be produced."""

    path: Path
    reason: str


@dataclass
class ContainerReport:
    """Outcome of exporting one container."""

    source: Path
    states: int = 0
    stills_written: int = 0
    animations_written: int = 0
    collisions: list[Path] = field(default_factory=list)
    failures: list[ArtifactFailure] = field(default_factory=list)
    parse_error: str | None = None

    @property
    def ok(self) -> bool:
        return self.parse_error is None and not self.failures


@dataclass
class RunReport:
    """Outcome of a whole run."""

    containers: list[ContainerReport] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(c.ok for c in self.containers)

    @property
    def stills_written(self) -> int:
        return sum(c.stills_written for c in self.containers)

    @property
    def animations_written(self) -> int:
        return sum(c.animations_written for c in self.containers)

    @property
    def collisions(self) -> int:
        return sum(len(c.collisions) for c in self.containers)

    @property
    def failures(self) -> int:
        return sum(len(c.failures) + (c.parse_error is not None) for c in self.containers)


def prepare_output_root(config: ExportConfig, logger: SimpleLogger) -> None:
    """Create the output root, or abort the run.

    Raises:
        OutputRootError: Chained to the underlying OSError.
    """
    root = config.output_root
    if root.is_dir():
        return
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as ex:
        logger.critical(f"Failed to create directory {root}")
        raise OutputRootError(root) from ex


class Exporter:
    """Writes every planned artifact of one or more containers.

    Planned paths are remembered across the whole run so that a duplicate
    state name, or two inputs sharing a base name in the flat layout, is
    reported instead of silently overwriting an earlier artifact.
    """

    def __init__(
        self,
        config: ExportConfig,
        logger: SimpleLogger,
        writer: ArtifactWriter | None = None,
        reader: ContainerReader = read_container,
        loop: int = ANIMATION_LOOP,
    ) -> None:
        self.config = config
        self.logger = logger
        self.writer = writer or ArtifactWriter()
        self.reader = reader
        self.loop = loop
        self._claimed: set[Path] = set()

    def export_container(self, path: Path) -> ContainerReport:
        """Open one container, export all its states, and release it."""
        path = Path(path)
        report = ContainerReport(source=path)
        base = container_base_name(path)

        try:
            container = self.reader(path)
        except ContainerFormatError as ex:
            report.parse_error = ex.reason
            self.logger.error(f"Failed to parse {path}: {ex.reason}")
            return report

        with container:
            report.states = len(container.states)
            for state in container.states:
                self._export_state(base, state, report)
        return report

    def export_files(self, files: Iterable[Path]) -> RunReport:
        run = RunReport()
        files = list(files)
        for i, path in enumerate(files, 1):
            self.logger.info(f"[{i:02d}/{len(files)}] {path}")
            report = self.export_container(Path(path))
            run.containers.append(report)
            if report.parse_error is None:
                msg = (
                    f"    -> {report.states} states, {report.stills_written} stills, "
                    f"{report.animations_written} animations"
                )
                if report.ok:
                    self.logger.success(msg)
                else:
                    self.logger.warning(f"{msg}, {len(report.failures)} failed")
        return run

    # ------------------------------
    # Per-state export
    # ------------------------------

    def _export_state(self, base: str, state: State, report: ContainerReport) -> None:
        if self.config.export_still:
            for planned in plan_still_paths(self.config, base, state):
                if self._claim(planned, report):
                    self._write(planned, report)
        if self.config.export_animated:
            for planned in plan_animated_paths(self.config, base, state):
                if self._claim(planned, report):
                    self._write(planned, report)

    def _claim(self, planned: PlannedArtifact, report: ContainerReport) -> bool:
        if planned.path in self._claimed:
            report.collisions.append(planned.path)
            self.logger.warning(
                f"Duplicate output {planned.path} (state {planned.state.name!r}); keeping the earlier artifact"
            )
            return False
        self._claimed.add(planned.path)
        return True

    def _write(self, planned: PlannedArtifact, report: ContainerReport) -> None:
        try:
            if planned.frame is not None:
                image = planned.state.image(planned.direction, planned.frame)
                self.writer.write_still(image, planned.path)
                report.stills_written += 1
            else:
                with contextlib.closing(assemble(planned.state, planned.direction, self.loop)) as animation:
                    self.writer.write_animation(animation, planned.path)
                report.animations_written += 1
        except (OSError, ValueError, DmiExtractError) as ex:
            reason = f"{type(ex).__name__}: {ex}"
            report.failures.append(ArtifactFailure(planned.path, reason))
            self.logger.error(f"Failed to write {planned.path}: {reason}")


def export_files(
    files: Iterable[Path],
    config: ExportConfig,
    logger: SimpleLogger,
    writer: ArtifactWriter | None = None,
    reader: ContainerReader = read_container,
) -> RunReport:
    """Export every container in order with a fresh Exporter."""
    return Exporter(config, logger, writer=writer, reader=reader).export_files(files)
