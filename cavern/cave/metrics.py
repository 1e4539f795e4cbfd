from typing import Dict


def init_metrics() -> Dict[str, int | float | bool]:
    return {
        'regions_initial': 0,
        'regions_pruned': 0,
        'regions_final': 0,
        'tunnels_carved': 0,
        'cells_carved': 0,
        'connect_iterations': 0,
        'converged': False,
        'runtime_ms': 0.0,
    }
