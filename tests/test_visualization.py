"""
可视化模块测试
"""

import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from errors import ErrorKind
from main import Command
from visualization import Visualizer

from conftest import make_fs


def test_bitmap_grid_shape():
    fs = make_fs(8192)
    grid = fs.get_bitmap_visual()
    assert len(grid) == 4
    assert all(len(row) == 4 for row in grid)
    assert grid[0][0] is True
    assert grid[0][1] is False


def test_bitmap_grid_pads_last_row():
    fs = make_fs(5120)
    grid = fs.get_bitmap_visual()
    assert len(grid) == 3
    assert grid[-1] == [False, False, None, None]


def test_bitmap_figure_to_png(fs):
    fs.make_directory('docs')
    viz = Visualizer()
    fig = viz.create_bitmap_figure(fs.get_bitmap_visual())
    assert isinstance(fig, Figure)
    data = viz.figure_to_bytes(fig, dpi=30)
    assert data.startswith(b'\x89PNG')


def test_disk_info_figure_with_and_without_files(fs, tmp_path):
    viz = Visualizer()
    empty = viz.create_disk_info_figure(fs.get_disk_info(), fs.list_files())
    viz.save_figure(empty, str(tmp_path / 'empty.png'), dpi=30)

    fs.make_directory('docs')
    fs.create_file('a.txt', 700, 'docs')
    files = fs.list_files()
    assert files[0]['blocks'] == 2
    assert files[0]['permission'] == 'rwxr-xr--'
    fig = viz.create_disk_info_figure(fs.get_disk_info(), files)
    viz.save_figure(fig, str(tmp_path / 'disk.png'), dpi=30)
    assert (tmp_path / 'empty.png').exists()
    assert (tmp_path / 'disk.png').exists()


def test_viz_command(simulator, tmp_path):
    target = tmp_path / 'bitmap.png'
    result = simulator.dispatch(Command('viz', ['bitmap', str(target)]))
    assert result.ok
    assert target.exists()
    assert simulator.dispatch(Command('viz', ['pie'])).error is not None


def test_viz_command_with_unsupported_extension(simulator, tmp_path):
    target = tmp_path / 'out.xyz'
    open_figures = len(plt.get_fignums())
    result = simulator.dispatch(Command('viz', ['bitmap', str(target)]))
    assert not result.ok
    assert result.error == ErrorKind.INVALID_OPERATION
    assert not target.exists()
    assert len(plt.get_fignums()) == open_figures


def test_file_list_keeps_allocated_blocks_after_write(fs):
    fs.make_directory('docs')
    fs.create_file('a.txt', 600, 'docs')
    fs.write_file('a.txt', 'hi')
    [entry] = fs.list_files()
    assert entry['size'] == 2
    assert entry['blocks'] == 2
