"""Page rasterization using poppler's pdftocairo.

The rasterizer renders the first page of a source document into a PNG.
pdftocairo is run to completion with a timeout; its exit is the completion
signal, after which the output file must exist.
"""

import shutil
import subprocess
from pathlib import Path

from fontcaster.exceptions import CollaboratorFailure, StageTimeoutError

STAGE = "rasterize"


class PopplerRasterizer:
    """Renders page-description documents to PNG with pdftocairo.

    Example:
        rasterizer = PopplerRasterizer(size=512, timeout_s=30)
        image_path = rasterizer.rasterize(Path("A.pdf"), Path("/tmp/rasters"))
    """

    def __init__(
        self,
        size: int = 512,
        timeout_s: float = 60.0,
        executable: str = "pdftocairo",
    ) -> None:
        """Initialize the rasterizer.

        Args:
            size: Longest side of the rendered image in pixels
            timeout_s: Maximum time to wait for pdftocairo
            executable: pdftocairo executable name or path
        """
        self.size = size
        self.timeout_s = timeout_s
        self.executable = executable

    def is_available(self) -> bool:
        """Check whether the pdftocairo executable can be found."""
        return shutil.which(self.executable) is not None

    def command(self, document: Path, output_dir: Path) -> list[str]:
        """Build the pdftocairo command line for a document."""
        return [
            self.executable,
            "-png",
            "-singlefile",
            "-f",
            "1",
            "-l",
            "1",
            "-scale-to",
            str(self.size),
            str(document),
            str(output_dir / document.stem),
        ]

    def rasterize(self, document: Path, output_dir: Path) -> Path:
        """Render the first page of a document to PNG.

        Args:
            document: Source document path
            output_dir: Directory that receives the image

        Returns:
            Path to the rendered PNG ({output_dir}/{stem}.png)

        Raises:
            StageTimeoutError: If pdftocairo does not finish in time
            CollaboratorFailure: If pdftocairo is missing, fails, or produces
                no image
        """
        image_path = output_dir / f"{document.stem}.png"

        try:
            result = subprocess.run(
                self.command(document, output_dir),
                capture_output=True,
                text=True,
                timeout=self.timeout_s,
                check=False,
            )
        except FileNotFoundError as e:
            raise CollaboratorFailure(
                STAGE, f"'{self.executable}' not found (install poppler-utils)", document
            ) from e
        except subprocess.TimeoutExpired as e:
            raise StageTimeoutError(STAGE, self.timeout_s, document) from e

        if result.returncode != 0:
            reason = result.stderr.strip() or f"exit status {result.returncode}"
            raise CollaboratorFailure(STAGE, reason, document)

        if not image_path.is_file():
            raise CollaboratorFailure(STAGE, f"no image produced at '{image_path}'", document)

        return image_path
