from dataclasses import dataclass
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

@dataclass(frozen=True)
class Settings:
    # Paths
    output_dir: Path = PROJECT_ROOT / "outputs"

    # Chain defaults
    absorbing_tolerance: float = 1e-7
    default_seed: int = 123

    # Demo sizes
    n_walks: int = 1000
    n_draws: int = 10_000

settings = Settings()
