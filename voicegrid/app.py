#!/usr/bin/env python3
"""Voice Data Grid application entry point.

Two front ends share one VoiceSession:
- window mode: pygame grid with keyboard/mouse fallback and a results page
- console mode: utterances typed on stdin (or read from a script file),
  results table printed at the end
"""

import argparse
import os
import sys
import time

from dotenv import load_dotenv

from voicegrid.__version__ import __version__
from voicegrid.core.config_loader import load_config, override_from_args
from voicegrid.core.event_bus import EventBus, EventType
from voicegrid.core.logging_utils import close_file_logging, configure_from_config, setup_logger
from voicegrid.grid.results import format_results
from voicegrid.voice import VoiceSession, create_speech_source

logger = setup_logger("voicegrid")


def parse_arguments(argv=None):
    """Parse command-line arguments.

    Returns:
        argparse.Namespace: Parsed arguments
    """
    parser = argparse.ArgumentParser(description="Voice Data Grid")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--fullscreen", action="store_true", help="Run in fullscreen mode")
    parser.add_argument("--resolution", type=str, help="Window resolution (e.g., 1280x520)")
    parser.add_argument("--display", type=int, help="Display index (0=primary, 1=secondary)")
    parser.add_argument(
        "--console",
        action="store_true",
        help="Read utterances from stdin instead of the microphone (no window)",
    )
    parser.add_argument("--script", type=str, help="Read utterances from a file, one per line")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "debug", "info", "warning", "error"],
        help="Override logging.level",
    )
    return parser.parse_args(argv)


def _print_feedback(event):
    if event.type == EventType.VOICE_COMMAND_RECOGNIZED:
        action = event.payload["action"]
        details = ", ".join(f"{k}={v}" for k, v in action.items() if k != "type")
        print(f"  -> {action['type']}" + (f" ({details})" if details else ""))
    elif event.type in (EventType.VOICE_COMMAND_UNRECOGNIZED, EventType.CELL_NOT_FOUND):
        print(f"  !! {event.payload['message']}")
    elif event.type == EventType.VOICE_ERROR:
        print(f"  !! {event.payload.get('message') or event.payload.get('error')}")


def run_console(session: VoiceSession, event_bus: EventBus) -> int:
    """Drive the session from a text source until the input runs out.

    Returns:
        Process exit code
    """
    for event_type in (
        EventType.VOICE_COMMAND_RECOGNIZED,
        EventType.VOICE_COMMAND_UNRECOGNIZED,
        EventType.CELL_NOT_FOUND,
        EventType.VOICE_ERROR,
    ):
        event_bus.subscribe(event_type, _print_feedback)

    if not session.start():
        print(session.error, file=sys.stderr)
        return 1

    try:
        while session.source.is_busy() or event_bus.has_pending():
            if event_bus.process_events() == 0:
                time.sleep(0.01)
    except KeyboardInterrupt:
        pass
    finally:
        session.close()
        event_bus.process_events()

    print()
    print(format_results(session.state))
    return 0


def init_display(config: dict):
    """Create the pygame window from the ``render`` config section."""
    import pygame

    os.environ.setdefault("SDL_VIDEO_ALLOW_SCREENSAVER", "0")
    pygame.init()

    render_config = config.get("render", {})
    display_index = render_config.get("display", 0)
    if display_index > 0:
        # Assumes the secondary display sits to the right of the primary
        info = pygame.display.Info()
        os.environ["SDL_VIDEO_WINDOW_POS"] = f"{info.current_w},0"

    flags = pygame.FULLSCREEN if render_config.get("fullscreen", False) else 0
    screen = pygame.display.set_mode(tuple(render_config.get("resolution", (1280, 520))), flags)
    pygame.display.set_caption(config.get("title", "Voice Data Grid"))
    return screen


def run_window(session: VoiceSession, event_bus: EventBus, config: dict) -> int:
    """Run the pygame grid until the window is closed.

    Keys: arrows move, Enter/Space toggle the focused sub-cell, V toggles
    listening, C clears the transcript, R shows results, Esc quits.
    """
    import pygame

    from voicegrid.grid.navigation import handle_cell_click, handle_key, handle_sub_click
    from voicegrid.ui.grid_view import KEY_NAMES, GridView

    screen = init_display(config)
    view = GridView(config, screen.get_size())
    fps = config.get("render", {}).get("fps", 30)

    if session.is_supported:
        session.start()
    else:
        session.error = session.error or "Voice input is not supported. Use --console."
        logger.warning("Voice input not supported; keyboard and mouse only")

    clock = pygame.time.Clock()
    show_results = False
    running = True
    try:
        while running:
            clock.tick(fps)
            event_bus.process_events(max_events=100)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE or (
                        event.key == pygame.K_q and event.mod & pygame.KMOD_CTRL
                    ):
                        running = False
                    elif event.key == pygame.K_r:
                        show_results = not show_results
                    elif event.key == pygame.K_v:
                        session.toggle_listening()
                    elif event.key == pygame.K_c:
                        session.clear_transcript()
                    elif event.key in KEY_NAMES and not show_results:
                        session.state = handle_key(session.state, KEY_NAMES[event.key])
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 and not show_results:
                    hit = view.layout.hit_test(event.pos)
                    if hit is not None:
                        cell_index, sub_index = hit
                        if sub_index is None:
                            session.state = handle_cell_click(session.state, cell_index)
                        else:
                            session.state = handle_sub_click(session.state, cell_index, sub_index)

            view.draw(screen, session, show_results=show_results)
            pygame.display.flip()
    finally:
        print("\nShutting down...")
        event_bus.emit(EventType.SHUTDOWN, source="main_loop")
        session.close()
        event_bus.process_events()
        bus_metrics = event_bus.get_metrics()
        logger.info(f"Events processed={bus_metrics['events_processed']}")
        event_bus.shutdown()
        pygame.quit()
    return 0


def main(argv=None) -> int:
    load_dotenv()
    args = parse_arguments(argv)

    config = load_config()
    try:
        override_from_args(config, args)
    except ValueError as e:
        print(e, file=sys.stderr)
        return 2
    configure_from_config(config)
    logger.info(f"Voice Data Grid {__version__} starting")

    event_bus = EventBus()
    lines = None
    if args.script:
        try:
            with open(args.script) as f:
                lines = f.readlines()
        except OSError as e:
            print(f"Cannot read script {args.script}: {e}", file=sys.stderr)
            return 2

    source = create_speech_source(config, event_bus=event_bus, lines=lines)
    session = VoiceSession(event_bus, source=source, config=config)

    try:
        if config.get("voice", {}).get("source") == "console":
            return run_console(session, event_bus)
        return run_window(session, event_bus, config)
    finally:
        close_file_logging()


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        pass
