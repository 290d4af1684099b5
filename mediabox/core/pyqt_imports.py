"""Module: pyqt_imports.py.

Author: Michael Economou
Date: 2026-10-19

Single place where Qt classes are imported. Only QtCore and QtGui image
classes are used, none of which need a running QApplication.
"""

from PyQt5.QtCore import QBuffer, QByteArray, QIODevice, QMimeDatabase, Qt
from PyQt5.QtGui import QColor, QImage, QImageReader

__all__ = [
    "QBuffer",
    "QByteArray",
    "QColor",
    "QIODevice",
    "QImage",
    "QImageReader",
    "QMimeDatabase",
    "Qt",
]
