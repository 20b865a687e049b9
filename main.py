# main.py
"""
Main entry point for the stochastic gravity walk.

This script orchestrates the application lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Sets up the window, the engine and its particles.
4. Runs the frame loop.
5. Handles clean shutdown.
"""
import logging
from utils import setup_logging, load_config, should_log_step
import numpy as np
import cProfile
import pstats
import io
import pygame


def main():
    """
    The main function to run the application.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Stochastic Gravity Walk Starting ---")

    sim_params = config.get('simulation_parameters', {})
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})

    from config import SimulationConfig
    from engine import Engine
    from visualization import Visualizer

    try:
        sim_config = SimulationConfig.from_params(sim_params)
    except ValueError:
        logging.critical("Invalid simulation parameters. Shutting down.")
        return

    # --- Component Initialization ---
    # 1. The visualizer determines the canvas dimensions.
    visualizer = Visualizer(vis_params)

    # 2. The engine renders through the visualizer from now on.
    engine = Engine(
        sim_config,
        visualizer.sim_width,
        visualizer.sim_height,
        renderer=visualizer.render,
        time_source=pygame.time.get_ticks,
    )

    profiler = cProfile.Profile()

    log_throttle = run_params.get('log_throttle_steps', 500)
    max_steps = run_params.get('max_steps', 0)  # 0 runs until the window closes
    if run_params.get('start_running', True):
        engine.clock.start(pygame.time.get_ticks())

    running = True
    profiler.enable()
    while running:
        running = visualizer.handle_events(engine)
        if not running:
            break

        if engine.frame():
            step_num = engine.simulation.step_count
            # Hot loops must throttle logs
            if should_log_step(step_num, log_throttle):
                logging.info(f"Simulation tick {step_num}")
                centroid = np.mean(engine.positions, axis=0)
                logging.debug(
                    f"Tick {step_num} | Population centroid: "
                    f"({centroid[0]:.1f}, {centroid[1]:.1f})"
                )

            if max_steps and step_num >= max_steps:
                logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
                running = False

        visualizer.wait_frame()
    profiler.disable()

    visualizer.close()
    logging.info("Frame loop finished.")

    # --- Performance Profile Output ---
    logging.info("--- Performance Profile ---")
    s = io.StringIO()
    stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
    stats.print_stats(20)
    logging.info(f"\n{s.getvalue()}")

    logging.info("--- Stochastic Gravity Walk Shutting Down ---")


if __name__ == "__main__":
    main()
