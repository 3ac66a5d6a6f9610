import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt5 import QtWidgets

from neurosphere.view.geometry import Point3D


@pytest.fixture(scope="session")
def qapp():
    """Single offscreen QApplication shared by the whole session."""
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep theme preferences out of the real home directory."""
    monkeypatch.setenv("NEUROSPHERE_HOME", str(tmp_path / "home"))
    monkeypatch.delenv("NEUROSPHERE_FORCE_BACKEND", raising=False)
    return tmp_path / "home"


class FakeContainer:
    """Anything with width()/height() can host the surface."""

    def __init__(self, width=400, height=400):
        self.w = width
        self.h = height

    def width(self):
        return self.w

    def height(self):
        return self.h


@pytest.fixture
def container():
    return FakeContainer()


@pytest.fixture
def two_points():
    return [Point3D(100.0, 0.0, 0.0), Point3D(-100.0, 0.0, 0.0)]
