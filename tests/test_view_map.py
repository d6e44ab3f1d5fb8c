from __future__ import annotations

import numpy as np
import pytest

from lenticalib.config import ConfigurationError
from lenticalib.core.lenticular import compute_lenticular_sheet
from lenticalib.core.lightfield import compute_lightfield_resolution
from lenticalib.core.screen import compute_screen_geometry
from lenticalib.core.view_map import ViewMapEntry, compute_view_map


def _setup(offset: float = 0.5, lpi: float = 30.0, h: int = 1024, v: int = 768, diag: float = 15.4):
    screen = compute_screen_geometry(h, v, diag)
    sheet = compute_lenticular_sheet(lpi, offset, 5.0)
    lf = compute_lightfield_resolution(screen, sheet)
    return screen, sheet, lf


@pytest.mark.parametrize("upscale", [1, 3])
def test_one_entry_per_upsampled_column(upscale: int) -> None:
    screen, sheet, lf = _setup()
    vm = compute_view_map(screen, sheet, lf, upscale)
    assert len(vm) == upscale * 1024
    assert np.array_equal(vm.pixel, np.arange(upscale * 1024))
    assert vm.upscale == upscale


def test_first_columns_by_hand() -> None:
    screen, sheet, lf = _setup(offset=0.5)
    vm = compute_view_map(screen, sheet, lf, 1)
    assert vm.entry(0) == ViewMapEntry(pixel=0, lens=0, view=1, valid=False)
    assert vm.entry(1) == ViewMapEntry(pixel=1, lens=1, view=3, valid=True)
    assert vm.entry(2) == ViewMapEntry(pixel=2, lens=1, view=2, valid=True)


def test_validity_matches_lens_range() -> None:
    for offset in (0.0, 0.25, 0.5, 0.9):
        screen, sheet, lf = _setup(offset=offset)
        vm = compute_view_map(screen, sheet, lf, 2)
        expected = (vm.lens >= 1) & (vm.lens <= lf.spatial_res)
        assert np.array_equal(vm.valid, expected)


def test_boundary_lenses_are_invalid() -> None:
    # Offset pushes the first columns before lens 1.
    screen, sheet, lf = _setup(offset=0.5)
    vm = compute_view_map(screen, sheet, lf, 1)
    assert vm.lens.min() == 0
    assert not np.any(vm.valid[vm.lens == 0])

    # Without offset the last columns fall under a partial lens past spatial_res.
    screen, sheet, lf = _setup(offset=0.0)
    vm = compute_view_map(screen, sheet, lf, 1)
    assert vm.lens.max() == lf.spatial_res + 1
    assert not np.any(vm.valid[vm.lens == lf.spatial_res + 1])
    assert np.all(vm.valid[vm.lens == lf.spatial_res])


@pytest.mark.parametrize("upscale", [1, 4])
def test_lens_index_is_a_step_sequence(upscale: int) -> None:
    screen, sheet, lf = _setup(offset=0.3)
    vm = compute_view_map(screen, sheet, lf, upscale)
    steps = np.diff(vm.lens)
    assert set(np.unique(steps).tolist()) <= {0, 1}

    # Interior runs only; the first and last lens are cut by the screen edges.
    change = np.flatnonzero(steps) + 1
    runs = np.diff(change)
    expected = sheet.lens_width_mm * screen.dots_per_mm * upscale
    assert runs.size > 100
    assert np.all(runs >= np.floor(expected))
    assert np.all(runs <= np.ceil(expected))


def test_view_indices_are_clamped_to_angular_range() -> None:
    for lpi in (10.0, 20.0, 30.0, 45.0, 60.0):
        screen, sheet, lf = _setup(lpi=lpi, offset=0.1)
        vm = compute_view_map(screen, sheet, lf, 3)
        assert vm.view.min() >= 1
        assert vm.view.max() <= max(lf.angular_res, 1)


def test_views_decrease_across_a_lens() -> None:
    screen, sheet, lf = _setup(lpi=10.0, offset=0.0, h=1920, v=1080, diag=15.6)
    vm = compute_view_map(screen, sheet, lf, 1)
    for lens in (5, 50, 100):
        views = vm.view[vm.lens == lens]
        assert views.size >= lf.angular_res - 1
        assert np.all(np.diff(views) <= 0)


def test_even_angular_res_uses_integer_centre() -> None:
    # 14 views: the centre term is (14 + 1) // 2 == 7, not 7.5.
    screen, sheet, lf = _setup(lpi=10.0, offset=0.0, h=1920, v=1080, diag=15.6)
    assert lf.angular_res == 14
    vm = compute_view_map(screen, sheet, lf, 1)
    assert vm.entry(0) == ViewMapEntry(pixel=0, lens=1, view=13, valid=True)
    assert vm.entry(1) == ViewMapEntry(pixel=1, lens=1, view=12, valid=True)
    assert vm.entry(6).view == 7
    # Trailing edge truncates to 0 and is clamped up.
    assert vm.entry(13) == ViewMapEntry(pixel=13, lens=1, view=1, valid=True)
    assert vm.entry(14).lens == 2


def test_iteration_yields_entries() -> None:
    screen, sheet, lf = _setup(h=64, v=48, diag=12.0, lpi=10.0)
    vm = compute_view_map(screen, sheet, lf, 2)
    entries = list(vm)
    assert len(entries) == len(vm)
    for e in entries[:10]:
        assert e.lens == vm.lens[e.pixel]
        assert e.view == vm.view[e.pixel]
        assert e.valid == vm.valid[e.pixel]
    assert vm.n_valid == sum(e.valid for e in entries)


def test_map_is_read_only_and_restartable() -> None:
    screen, sheet, lf = _setup()
    a = compute_view_map(screen, sheet, lf, 2)
    b = compute_view_map(screen, sheet, lf, 2)
    assert np.array_equal(a.lens, b.lens)
    assert np.array_equal(a.view, b.view)
    with pytest.raises(ValueError):
        a.lens[0] = 42


@pytest.mark.parametrize("upscale", [0, -1, 1.5, float("inf"), float("nan"), "2"])
def test_rejects_bad_upscale(upscale) -> None:
    screen, sheet, lf = _setup()
    with pytest.raises(ConfigurationError):
        compute_view_map(screen, sheet, lf, upscale)
