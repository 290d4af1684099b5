"""Module: providers.py

Author: Michael Economou
Date: 2026-10-19

Thumbnail rendering for image content.

Provides:
- ThumbnailGenerationError: raised when a source cannot be rendered
- ThumbnailProvider: Abstract base class for renderers
- ImageThumbnailProvider: Qt image readers + QImage scaling, PNG output

Scaling modes:
- fit (default): scale down to fit inside width x height, aspect preserved;
  images already inside the box are not enlarged
- caret: scale to cover width x height, aspect preserved, then crop the
  overflow around the centre so the result is exactly width x height

Usage:
    provider = ImageThumbnailProvider()
    png_bytes = provider.render(Path("/srv/drive/IMG_0001.jpg"), signature)
"""

from abc import ABC, abstractmethod
from pathlib import Path

from mediabox.config import THUMBNAIL_ARTIFACT_FORMAT
from mediabox.core.errors import GenerationFailure
from mediabox.core.pyqt_imports import QBuffer, QByteArray, QImage, QImageReader, QIODevice, Qt
from mediabox.core.thumbnail.transform import TransformSignature
from mediabox.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)


class ThumbnailGenerationError(GenerationFailure):
    """Raised when thumbnail generation fails."""


class ThumbnailProvider(ABC):
    """Abstract base class for thumbnail generation.

    Subclasses must implement:
    - render(source, signature) -> bytes
    - supports(source) -> bool
    """

    def __init__(self, artifact_format: str = THUMBNAIL_ARTIFACT_FORMAT):
        self.artifact_format = artifact_format

    @abstractmethod
    def render(self, source: Path, signature: TransformSignature) -> bytes:
        """Render source according to signature.

        Returns:
            Encoded artifact bytes

        Raises:
            ThumbnailGenerationError: If generation fails

        """

    @abstractmethod
    def supports(self, source: Path) -> bool:
        """Check if provider can render this file."""


class ImageThumbnailProvider(ThumbnailProvider):
    """Thumbnail generation for image files using Qt image readers.

    Thread-safe: QImage/QImageReader are reentrant and used without a
    QApplication, so workers can render concurrently.
    """

    def supports(self, source: Path) -> bool:
        """Check whether Qt recognizes the file content as an image format."""
        return not QImageReader.imageFormat(str(source)).isEmpty()

    def render(self, source: Path, signature: TransformSignature) -> bytes:
        """Render an image thumbnail.

        Args:
            source: Image file to read
            signature: Target box, modifier and orientation handling

        Returns:
            Encoded artifact bytes (PNG by default)

        Raises:
            ThumbnailGenerationError: If the image cannot be decoded or encoded

        """
        reader = QImageReader(str(source))
        reader.setAutoTransform(signature.auto_orient)
        image = reader.read()
        if image.isNull():
            raise ThumbnailGenerationError(
                f"Failed to load image: {source} ({reader.errorString()})", source
            )

        scaled = self.scale(image, signature)
        data = self._encode(scaled)
        if not data:
            raise ThumbnailGenerationError(f"Failed to encode thumbnail: {source}", source)

        logger.debug(
            "[ImageThumbnailProvider] Rendered %s -> %s (%dx%d)",
            Path(source).name,
            signature.canonical(),
            scaled.width(),
            scaled.height(),
        )
        return data

    @staticmethod
    def scale(image: QImage, signature: TransformSignature) -> QImage:
        """Apply the signature's scaling mode to image."""
        width, height = signature.width, signature.height

        if signature.is_caret:
            covered = image.scaled(
                width, height, Qt.KeepAspectRatioByExpanding, Qt.SmoothTransformation
            )
            x = max(0, (covered.width() - width) // 2)
            y = max(0, (covered.height() - height) // 2)
            return covered.copy(x, y, width, height)

        if image.width() <= width and image.height() <= height:
            return image
        return image.scaled(width, height, Qt.KeepAspectRatio, Qt.SmoothTransformation)

    def _encode(self, image: QImage) -> bytes:
        byte_array = QByteArray()
        buffer = QBuffer(byte_array)
        buffer.open(QIODevice.WriteOnly)
        try:
            ok = image.save(buffer, self.artifact_format)
        finally:
            buffer.close()
        return byte_array.data() if ok else b""
