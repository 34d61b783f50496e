"""
Pipeline orchestrator that plans and places every file of a source tree.

Files are handled one at a time. Each file is planned, reported and then,
unless this is a dry run, copied or moved into the destination tree. The
destination is touched synchronously before the next file is looked at, so
each collision check sees every earlier write of the same run.
"""

import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from filesystem.collisions import DEFAULT_MAX_ATTEMPTS, resolve_target
from filesystem.file_ops import FileSystemOperations
from filesystem.metadata_reader import MetadataReader
from models.schemas import BatchResult, FileOutcome, OutcomeStatus
from pipeline.planner import PathPlanner
from utils.exceptions import MusicOrganizerError

logger = logging.getLogger(__name__)

OutcomeCallback = Callable[[FileOutcome], None]


class OrganizePipeline:
    """
    Execution policy for one organizer run.

    Collaborators are injected so tests can swap the metadata reader or the
    filesystem for fakes.
    """

    def __init__(
        self,
        planner: PathPlanner,
        filesystem_ops: FileSystemOperations,
        metadata_reader: Optional[MetadataReader] = None,
        move: bool = False,
        overwrite: bool = False,
        dry_run: bool = False,
        max_collision_attempts: int = DEFAULT_MAX_ATTEMPTS
    ):
        self.planner = planner
        self.filesystem_ops = filesystem_ops
        self.metadata_reader = metadata_reader or MetadataReader()
        self.move = move
        self.overwrite = overwrite
        self.dry_run = dry_run
        self.max_collision_attempts = max_collision_attempts

    @classmethod
    def from_config(cls, config: Dict[str, Any], dest_root: Path) -> 'OrganizePipeline':
        """Build a pipeline from a validated configuration dictionary."""
        organize = config['organize']
        planner = PathPlanner(
            dest_root=dest_root,
            pattern=organize['pattern'],
            required_extension=organize['required_extension']
        )
        filesystem_ops = FileSystemOperations(
            audio_extensions=config['filesystem']['source_extensions'],
            ignored_dirs=config['filesystem']['ignored_dirs']
        )
        return cls(
            planner=planner,
            filesystem_ops=filesystem_ops,
            move=organize['move'],
            overwrite=organize['overwrite'],
            dry_run=organize['dry_run'],
            max_collision_attempts=organize['max_collision_attempts']
        )

    def discover(self, source_dir: Path) -> List[Path]:
        """List every candidate file up front, in a stable order."""
        return sorted(self.filesystem_ops.discover_audio_files(source_dir))

    def process_library(
        self,
        source_dir: Path,
        on_outcome: Optional[OutcomeCallback] = None
    ) -> BatchResult:
        """
        Organize every audio file under source_dir.

        Args:
            source_dir: Root of the tree to organize
            on_outcome: Called with each FileOutcome as soon as it is known

        Returns:
            BatchResult with per-file outcomes and counts
        """
        logger.info(f"Starting organization of: {source_dir}")
        start_time = time.time()

        files = self.discover(source_dir)
        logger.info(f"Found {len(files)} audio files to process")

        result = self.process_files(files, on_outcome)

        logger.info(
            f"Completed in {time.time() - start_time:.2f} seconds. "
            f"Processed {result.processed}, skipped {result.skipped}, failed {result.errors}"
        )
        return result

    def process_files(
        self,
        files: List[Path],
        on_outcome: Optional[OutcomeCallback] = None
    ) -> BatchResult:
        """Run each file through the execution policy, in order."""
        result = BatchResult()

        for i, file_path in enumerate(files):
            if i % 50 == 0 and i > 0:
                logger.info(f"Processed {i}/{len(files)} files")

            outcome = self.process_single_file(file_path)
            result.record(outcome)
            if on_outcome:
                on_outcome(outcome)

        return result

    def process_single_file(self, file_path: Path) -> FileOutcome:
        """
        Plan and place one file.

        Failures of this file are returned as an errored outcome and never
        stop the batch.
        """
        plan = None
        try:
            metadata = self.metadata_reader.read(file_path)
            plan = self.planner.plan(metadata)
            if plan is None:
                logger.debug(f"Skipping {file_path}: empty target path")
                return FileOutcome(source_path=file_path, status=OutcomeStatus.SKIPPED)

            logger.debug(f"Planned {file_path} -> {plan.relative_target}")

            if self.dry_run:
                return FileOutcome(
                    source_path=file_path, status=OutcomeStatus.PROCESSED, plan=plan
                )

            final_target = self._materialize(file_path, plan.abs_target)
            if final_target != plan.abs_target:
                logger.info(f"Target existed, wrote {file_path} to {final_target}")

            return FileOutcome(
                source_path=file_path,
                status=OutcomeStatus.PROCESSED,
                plan=plan,
                final_target=final_target
            )

        except (MusicOrganizerError, OSError) as e:
            logger.error(f"Failed to process {file_path}: {e}")
            return FileOutcome(
                source_path=file_path,
                status=OutcomeStatus.ERRORED,
                plan=plan,
                error_message=str(e)
            )
        except Exception as e:
            logger.exception(f"Unexpected error processing {file_path}: {e}")
            return FileOutcome(
                source_path=file_path,
                status=OutcomeStatus.ERRORED,
                plan=plan,
                error_message=str(e) or type(e).__name__
            )

    def _materialize(self, source: Path, target: Path) -> Path:
        """Create the target directory, settle collisions and transfer the file."""
        fs = self.filesystem_ops
        fs.create_dirs(target.parent)

        final_target = resolve_target(
            target, self.overwrite, fs.exists, self.max_collision_attempts
        )
        if self.overwrite and fs.exists(final_target):
            if _is_same_file(source, final_target):
                # Already in place; deleting the target would delete the source
                logger.debug(f"{source} is already at its target")
                return final_target
            fs.delete(final_target)

        if self.move:
            fs.move(source, final_target)
        else:
            fs.copy(source, final_target)

        return final_target


def _is_same_file(a: Path, b: Path) -> bool:
    try:
        return a.samefile(b)
    except OSError:
        return False
