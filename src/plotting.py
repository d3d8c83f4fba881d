from __future__ import annotations

import os
import tempfile
from pathlib import Path


def get_pyplot(disable_plots: bool = False):
    """
    matplotlib.pyplot configured for headless runs when there is no display.
    """
    if "MPLCONFIGDIR" not in os.environ:
        mpl_dir = Path(tempfile.gettempdir()) / "markov_chain_mpl"
        mpl_dir.mkdir(parents=True, exist_ok=True)
        os.environ["MPLCONFIGDIR"] = str(mpl_dir)

    import matplotlib

    if "MPLBACKEND" not in os.environ and (disable_plots or "DISPLAY" not in os.environ):
        matplotlib.use("Agg", force=True)

    import matplotlib.pyplot as plt

    return plt


def save_figure(plt, out_path: Path) -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(out_path, dpi=150, bbox_inches="tight")
    plt.close()
    return out_path
