"""Tests for orientation classification."""

import logging

import pytest

from bookocr.models import Orientation, SplitLayout
from bookocr.pipeline.stage_orient import classify, resolve_layout


class TestClassify:
    """Tests for the height/width ratio heuristic."""

    @pytest.mark.parametrize(
        "width,height",
        [(3000, 1500), (1000, 800), (2480, 1000), (5000, 1)],
    )
    def test_landscape_is_double(self, width, height):
        """Ratios at or below 0.8 are double pages."""
        assert classify(width, height) == Orientation.DOUBLE

    @pytest.mark.parametrize(
        "width,height",
        [(2000, 3000), (1000, 1200), (2480, 3508), (1, 5000)],
    )
    def test_portrait_is_single(self, width, height):
        """Ratios at or above 1.2 are single pages."""
        assert classify(width, height) == Orientation.SINGLE

    @pytest.mark.parametrize(
        "width,height",
        [(1000, 1000), (1000, 801), (1000, 1199), (2000, 2100)],
    )
    def test_near_square_is_ambiguous(self, width, height):
        """Ratios strictly between the thresholds are ambiguous."""
        assert classify(width, height) == Orientation.AMBIGUOUS

    def test_rejects_empty_raster(self):
        """Zero dimensions cannot be classified."""
        with pytest.raises(ValueError):
            classify(0, 100)


class TestResolveLayout:
    """Tests for mapping decisions to splitter layouts."""

    def test_single_uses_one_page(self):
        assert resolve_layout(Orientation.SINGLE) == SplitLayout.ONE_PAGE

    def test_double_uses_two_pages(self):
        assert resolve_layout(Orientation.DOUBLE) == SplitLayout.TWO_PAGES

    def test_ambiguous_treated_as_double_with_warning(self, caplog):
        """Ambiguous pages are split in two and a warning names the page."""
        with caplog.at_level(logging.WARNING, logger="bookocr"):
            layout = resolve_layout(Orientation.AMBIGUOUS, "square.tif")

        assert layout == SplitLayout.TWO_PAGES
        assert any(
            r.levelno == logging.WARNING and "square.tif" in r.getMessage()
            for r in caplog.records
        )
