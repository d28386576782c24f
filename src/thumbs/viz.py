from __future__ import annotations
import math
import os
from typing import Sequence

import cv2
import matplotlib.pyplot as plt

from .codec import read_image


class Visualizer:
    """Plot helpers (only used when --show). No implicit showing in library paths."""

    @staticmethod
    def show_thumbnails(
        paths: Sequence[str],
        ncols: int = 6,
        cell_size: float = 2.0,
        show: bool = True,
    ) -> plt.Figure:
        n = max(1, len(paths))
        ncols = max(1, min(ncols, n))
        nrows = math.ceil(n / ncols)

        fig, axes = plt.subplots(nrows, ncols, figsize=(cell_size * ncols, cell_size * nrows), squeeze=False)
        flat = axes.ravel()
        for ax in flat:
            ax.axis("off")

        for ax, path in zip(flat, paths):
            img = cv2.cvtColor(read_image(path), cv2.COLOR_BGR2RGB)
            ax.imshow(img)
            ax.set_title(os.path.basename(path), fontsize=8)

        fig.tight_layout()
        if show:
            plt.show()
        return fig
