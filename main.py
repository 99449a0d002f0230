# main.py
"""
Main entry point for the particle network.

This script orchestrates the page lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Opens the host window and applies the initial theme.
4. Starts the particle network, if the viewport allows it.
5. Runs the frame loop and handles clean shutdown.
"""
import logging
from utils import setup_logging, load_config
import cProfile
import pstats
import io

def main():
    """
    The main function to run the page.
    """
    # Load configuration from the JSON file first.
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Particle Network Starting ---")

    network_params = config.get('network', {})
    page_params = config.get('page', {})
    theme_palettes = config.get('themes', {})
    run_params = config.get('run_control', {})

    from constants import MIN_ACTIVE_WIDTH
    from simulation import start_particles
    from visualization import PageHost

    # --- Component Initialization ---
    # 1. The host opens the window and applies the theme before anything
    #    reads colours from it.
    host = PageHost(page_params, theme_palettes)

    # 2. The engine measures the window itself and may decline to start.
    network = start_particles(
        host.page,
        network_params,
        min_active_width=page_params.get('min_active_width', MIN_ACTIVE_WIDTH)
    )
    host.attach(network)

    max_frames = run_params.get('max_frames', 0)
    log_throttle = run_params.get('log_throttle_frames', 300)

    if run_params.get('profile', False):
        # --- Profiler Setup (Rule 11) ---
        profiler = cProfile.Profile()
        profiler.enable()
        frames = host.run(max_frames=max_frames, log_throttle=log_throttle)
        profiler.disable()

        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")
    else:
        frames = host.run(max_frames=max_frames, log_throttle=log_throttle)

    host.close()
    logging.info(f"Frame loop finished after {frames} frames.")
    logging.info("--- Particle Network Shutting Down ---")


if __name__ == "__main__":
    main()
