from pathlib import Path
from csv import writer
from shutil import copyfile
from collections.abc import Collection


class FilePrinter:
    """
    Handles writing rows to a csv file with buffering and safe-saving.
    It writes to a temporary file first and then replaces the original
    to prevent corruption during interruption.
    """
    def __init__(
            self,
            file_name: str,
            save_freq: int,
            header: Collection[str] = None,
            resume: bool = False,
            create_dir: bool = True
    ):
        self.file_name = Path(file_name)
        self.temp_file_path = self.file_name.with_name(f"{self.file_name.stem}-temp{self.file_name.suffix}")
        self.save_freq = save_freq
        self.call_count = 0
        self.buffer = []

        if not resume or not self.file_name.exists():
            self._create_file(header, create_dir)

    def __call__(self, rows):
        """
        Adds one row (or a list of rows) to the buffer and writes out if the save frequency is met.
        """
        self.call_count += 1
        if rows and isinstance(rows[0], (list, tuple)):
            self.buffer.extend(rows)
        else:
            self.buffer.append(rows)

        if self.call_count % self.save_freq == 0:
            self.flush()

    def _print(self):
        """
        Appends the buffered rows to the temporary file.
        """
        with open(self.temp_file_path, 'a', newline='') as f:
            writer(f).writerows(self.buffer)

    def _copy_and_replace(self):
        """
        Copies the main file to a temp file, appends, and copies back.
        """
        try:
            if self.file_name.exists():
                copyfile(self.file_name, self.temp_file_path)
            self._print()
            copyfile(self.temp_file_path, self.file_name)
        finally:
            if self.temp_file_path.exists():
                self.temp_file_path.unlink()

    def flush(self):
        """
        Writes any buffered rows to the file.
        """
        if self.buffer:
            self._copy_and_replace()
            self.buffer = []

    def _create_file(self, header: Collection[str], create_dir: bool):
        """
        Creates a new, empty log file with an optional header.
        """
        if create_dir:
            self.file_name.parent.mkdir(parents=True, exist_ok=True)

        with open(self.file_name, 'w', newline='') as f:
            if header is not None:
                writer(f).writerow(header)


class SearchLogger:
    """
    Records a per-round trace of local search runs.

    `{file_prefix}-localsearch.csv` gets one row per round and
    `{file_prefix}-archive.csv` the archive contents written by `finalize`.
    Objective columns are named when the first round is logged.
    """
    def __init__(self, file_prefix: str, save_freq: int = 1, resume: bool = False):
        if save_freq < 1:
            raise ValueError(f"'save_freq' should be strictly greater than 0. Received: {save_freq}")
        self.file_prefix = file_prefix
        self.save_freq = save_freq
        self.resume = resume
        self.execution = -1
        self.round_printer = None

    def new_execution(self):
        self.execution += 1

    def log_round(self, round_index: int, outcome: str, evaluations: int, solution):
        """
        Logs the state of the current solution after a round.
        """
        if self.round_printer is None:
            header = (["execution", "round", "outcome", "evaluations", "violation"]
                      + [f"f_{i}" for i in range(solution.objectives.size)])
            self.round_printer = FilePrinter(
                file_name=f"{self.file_prefix}-localsearch.csv",
                save_freq=self.save_freq, header=header, resume=self.resume
            )
        self.round_printer([
            max(self.execution, 0),
            round_index,
            outcome,
            evaluations,
            solution.overall_constraint_violation_degree,
            *solution.objectives.tolist(),
        ])

    def finalize(self, archive=None):
        """
        Writes the archive (when given) and flushes all log files.
        """
        if archive is not None and len(archive) > 0:
            first = archive[0]
            header = ([f"x_{i}" for i in range(first.variables.size)]
                      + [f"f_{i}" for i in range(first.objectives.size)] + ["violation"])
            archive_printer = FilePrinter(
                file_name=f"{self.file_prefix}-archive.csv",
                save_freq=1, header=header, resume=False
            )
            archive_printer([
                [*s.variables.tolist(), *s.objectives.tolist(), s.overall_constraint_violation_degree]
                for s in archive
            ])
        if self.round_printer is not None:
            self.round_printer.flush()
