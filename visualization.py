"""
Unix风格文件系统模拟器 - 可视化模块
功能：磁盘块使用情况图、磁盘与文件信息图
"""

import matplotlib
matplotlib.use('Agg')  # 非交互式后端
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
import matplotlib.gridspec as gridspec
import numpy as np
from typing import Dict, List, Optional
from io import BytesIO

# 颜色配置
COLORS = {
    'free': '#90EE90',       # 浅绿色 - 空闲块
    'used': '#FF6B6B',       # 红色 - 已使用块
    'system': '#FFD93D',     # 黄色 - 根目录元数据块
    'padding': '#FFFFFF',    # 白色 - 网格中超出磁盘的位置
}

# 网格线在块数较少时才绘制
GRID_LINE_LIMIT = 64


def _hex_to_rgb(color: str) -> List[float]:
    color = color.lstrip('#')
    return [int(color[i:i + 2], 16) / 255.0 for i in (0, 2, 4)]


class Visualizer:
    """可视化器 - 生成各种可视化图表"""

    def create_bitmap_figure(self, bitmap_data: List[List[Optional[bool]]],
                             reserved_blocks: int = 1,
                             title: str = "Disk Block Map") -> Figure:
        """
        创建磁盘块使用情况图
        bitmap_data: 二维网格，True表示已使用，None表示超出磁盘范围
        reserved_blocks: 前若干块按根目录元数据着色
        """
        fig, ax = plt.subplots(figsize=(10, 10))

        rows = len(bitmap_data)
        cols = len(bitmap_data[0]) if rows > 0 else 1

        # 创建颜色矩阵
        color_matrix = np.ones((max(rows, 1), cols, 3))

        for i in range(rows):
            for j in range(cols):
                block_num = i * cols + j
                state = bitmap_data[i][j]
                if state is None:
                    color_matrix[i, j] = _hex_to_rgb(COLORS['padding'])
                elif block_num < reserved_blocks and state:
                    color_matrix[i, j] = _hex_to_rgb(COLORS['system'])
                elif state:
                    color_matrix[i, j] = _hex_to_rgb(COLORS['used'])
                else:
                    color_matrix[i, j] = _hex_to_rgb(COLORS['free'])

        ax.imshow(color_matrix, aspect='equal')

        # 添加网格线
        if cols <= GRID_LINE_LIMIT:
            ax.set_xticks(np.arange(-0.5, cols, 1), minor=True)
            ax.set_yticks(np.arange(-0.5, rows, 1), minor=True)
            ax.grid(which='minor', color='white', linestyle='-', linewidth=0.5)

        step = max(1, cols // 8)
        ax.set_xticks(np.arange(0, cols, step))
        ax.set_yticks(np.arange(0, rows, step))

        ax.set_xlabel('Block (column)', fontsize=12)
        ax.set_ylabel(f'Block (row x {cols})', fontsize=12)
        ax.set_title(title, fontsize=14, fontweight='bold')

        # 添加图例
        legend_elements = [
            plt.Rectangle((0, 0), 1, 1, facecolor=COLORS['system'], label='Root metadata'),
            plt.Rectangle((0, 0), 1, 1, facecolor=COLORS['used'], label='Used'),
            plt.Rectangle((0, 0), 1, 1, facecolor=COLORS['free'], label='Free'),
        ]
        ax.legend(handles=legend_elements, loc='upper right', fontsize=10)

        plt.tight_layout()
        return fig

    def create_disk_info_figure(self, disk_info: Dict,
                                file_list: List[Dict],
                                title: str = "Disk and Files") -> Figure:
        """创建磁盘信息和文件列表可视化"""
        fig = plt.figure(figsize=(14, 6))
        gs = gridspec.GridSpec(1, 2, width_ratios=[1, 1.5])

        # 1. 磁盘使用率
        ax1 = fig.add_subplot(gs[0, 0])
        self._draw_disk_usage(ax1, disk_info)

        # 2. 文件列表
        ax2 = fig.add_subplot(gs[0, 1])
        self._draw_file_list(ax2, file_list)

        fig.suptitle(title, fontsize=14, fontweight='bold')
        plt.tight_layout()
        return fig

    def _draw_disk_usage(self, ax, disk_info: Dict):
        """绘制磁盘使用率饼图"""
        used = disk_info.get('used_blocks', 0)
        free = disk_info.get('free_blocks', 0)

        # 过滤掉0值，避免空扇区
        slices = [(size, label, color) for size, label, color in (
            (used, f'Used\n{used} blocks', COLORS['used']),
            (free, f'Free\n{free} blocks', COLORS['free']),
        ) if size > 0]
        if slices:
            sizes, labels, colors = zip(*slices)
            ax.pie(sizes, labels=labels, colors=colors,
                   autopct='%1.1f%%', startangle=90, textprops={'fontsize': 10})

        total = disk_info.get('total_blocks', used + free)
        ax.text(0, 0, f'Total\n{total} blocks', ha='center', va='center',
                fontsize=12, fontweight='bold')

        ax.set_title('Disk usage', fontsize=12)

    def _draw_file_list(self, ax, file_list: List[Dict]):
        """绘制文件列表表格"""
        ax.axis('off')

        if not file_list:
            ax.text(0.5, 0.5, 'No files', ha='center', va='center', fontsize=12)
            return

        headers = ['Name', 'Directory', 'Size', 'Blocks', 'Owner', 'Permissions']
        cell_text = []

        for f in file_list[:8]:  # 最多显示8个文件
            cell_text.append([
                f['name'][:15],
                f['parent'][:15],
                f"{f['size']}B",
                str(f['blocks']),
                str(f['owner']),
                f['permission'],
            ])

        table = ax.table(cellText=cell_text, colLabels=headers,
                         loc='center', cellLoc='center')
        table.auto_set_font_size(False)
        table.set_fontsize(9)
        table.scale(1.2, 1.5)

        for i in range(len(headers)):
            table[(0, i)].set_facecolor('#6BCB77')
            table[(0, i)].set_text_props(fontweight='bold')

        ax.set_title('Files', fontsize=12)

    def save_figure(self, fig: Figure, filename: str, dpi: int = 150):
        """保存图表到文件"""
        try:
            fig.savefig(filename, dpi=dpi, bbox_inches='tight',
                        facecolor='white', edgecolor='none')
        finally:
            plt.close(fig)

    def figure_to_bytes(self, fig: Figure, dpi: int = 150) -> bytes:
        """将图表转换为字节数据"""
        buf = BytesIO()
        fig.savefig(buf, format='png', dpi=dpi, bbox_inches='tight',
                    facecolor='white', edgecolor='none')
        buf.seek(0)
        data = buf.getvalue()
        plt.close(fig)
        return data
