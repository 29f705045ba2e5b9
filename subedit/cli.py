"""Command-Line Interface handler for SubEdit."""

import argparse
import asyncio
import logging
import os
import sys

from tqdm import tqdm

from .config_loader import ConfigLoader
from .log_setup import setup_logging
from .exporter import ExportFormat, Exporter, FileExportSink, RenderJobWriter
from .media_probe import MediaProbe, validate_video_file
from .playback import PlaybackSync
from .session import EditingSession
from .style import CaptionPosition, CaptionSize, FONT_OPTIONS, Style
from .subtitle_formatter import get_formatter
from .tasks import ProcessingTask
from .timecode import format_editor, parse_editor
from .transcriber import SidecarTranscriber, start_transcription
from .exceptions import SubEditError, ConfigurationError, MalformedTimeCode

logger = logging.getLogger(__name__) # Get logger for this module

DEFAULT_CONFIG_PATH = "config.yaml"

def parse_position(value: str) -> float:
    """argparse type for playback positions: plain seconds or editor MM:SS.mmm."""
    try:
        seconds = float(value)
    except ValueError:
        try:
            return parse_editor(value)
        except MalformedTimeCode as e:
            raise argparse.ArgumentTypeError(str(e)) from None
    if seconds < 0:
        raise argparse.ArgumentTypeError(f"Position must be non-negative, got {value}")
    return seconds

class CLIHandler:
    """Parses arguments and runs SubEdit commands."""

    def __init__(self):
        self.parser = self._create_parser()

    def _add_style_arguments(self, parser: argparse.ArgumentParser) -> None:
        group = parser.add_argument_group("style overrides (default: config file)")
        group.add_argument("--font", choices=FONT_OPTIONS, default=None)
        group.add_argument("--size", choices=[s.value for s in CaptionSize], default=None)
        group.add_argument("--position", choices=[p.value for p in CaptionPosition], default=None)
        group.add_argument("--color", default=None, help="Text color as #RRGGBB.")
        group.add_argument(
            "--background",
            default=None,
            help="Background base color as #RRGGBB; the configured alpha is kept."
        )

    def _create_parser(self) -> argparse.ArgumentParser:
        """Creates the argument parser for the CLI."""
        parser = argparse.ArgumentParser(
            description="SubEdit: edit, style and export timed captions for a video.",
            formatter_class=argparse.ArgumentDefaultsHelpFormatter # Show defaults in help
        )
        parser.add_argument(
            "-c", "--config",
            default=DEFAULT_CONFIG_PATH,
            help="Path to the configuration YAML file. Missing default file means built-in defaults."
        )
        parser.add_argument(
            "--log-level",
            default="INFO",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Set the logging level for console and file output."
        )
        subparsers = parser.add_subparsers(dest="command", required=True)

        export = subparsers.add_parser(
            "export",
            help="Export a video's captions as SRT, WebVTT or a burn-in render job.",
            formatter_class=argparse.ArgumentDefaultsHelpFormatter
        )
        export.add_argument("-v", "--video", required=True, help="Path to the input video file.")
        export.add_argument(
            "-f", "--format",
            default=ExportFormat.SRT.value,
            choices=[f.value for f in ExportFormat],
            help="Export type."
        )
        export.add_argument(
            "-o", "--output-dir",
            default=None, # Default taken from config
            help="Override the output directory specified in the config file."
        )
        export.add_argument(
            "--captions",
            default=None,
            help="Caption file to import (.srt/.vtt). Defaults to a sidecar file next to the video."
        )
        export.add_argument(
            "-l", "--language",
            default=None, # Default taken from config
            help="Language label of the caption track."
        )
        self._add_style_arguments(export)

        convert = subparsers.add_parser(
            "convert",
            help="Convert between SRT and WebVTT.",
            formatter_class=argparse.ArgumentDefaultsHelpFormatter
        )
        convert.add_argument("-i", "--input", required=True, help="Input .srt or .vtt file.")
        convert.add_argument("-o", "--output", required=True, help="Output .srt or .vtt file.")

        show = subparsers.add_parser(
            "show",
            help="Show the caption active at a playback position and how it renders.",
            formatter_class=argparse.ArgumentDefaultsHelpFormatter
        )
        show.add_argument("-i", "--input", required=True, help="Input .srt or .vtt file.")
        show.add_argument(
            "--at",
            required=True,
            type=parse_position,
            help="Playback position in seconds or as MM:SS.mmm."
        )
        self._add_style_arguments(show)

        return parser

    def _resolve_style(self, config: dict, args: argparse.Namespace) -> Style:
        style = Style.from_dict(config.get('style'))
        overrides = {
            key: getattr(args, key)
            for key in ("font", "size", "position")
            if getattr(args, key) is not None
        }
        if overrides:
            style = Style.from_dict({**style.to_dict(), **overrides})
        if args.color:
            style = style.with_text_color(args.color)
        if args.background:
            style = style.with_background_color(args.background)
        return style

    def _run_task(self, task: ProcessingTask):
        """Runs a ProcessingTask to completion with a tqdm progress bar."""
        with tqdm(total=100, unit="%", desc=task.name, leave=False) as pbar:
            def on_progress(event):
                pbar.n = event.percent
                pbar.set_postfix_str(event.message)
                pbar.refresh()

            task.add_listener(on_progress)

            async def runner():
                return await task.start()

            return asyncio.run(runner())

    def _export(self, args: argparse.Namespace, config: dict) -> None:
        max_bytes = int(config.get('max_upload_mb', 200)) * 1024 * 1024
        video = validate_video_file(args.video, max_bytes=max_bytes)

        language = args.language or config.get('default_language', 'English')
        probe = MediaProbe(config.get('ffprobe_path')) if config.get('probe_duration', True) else None
        transcriber = SidecarTranscriber(language=language, probe=probe, caption_path=args.captions)
        result = self._run_task(start_transcription(transcriber, video))

        session = EditingSession.from_transcription(video, result, style=self._resolve_style(config, args))
        output_dir = args.output_dir or config.get('output_dir', 'exports')
        exporter = Exporter(
            sink=FileExportSink(output_dir),
            renderer=RenderJobWriter(config.get('render_job_dir') or output_dir),
        )

        export_format = ExportFormat(args.format)
        if export_format is ExportFormat.VIDEO:
            location = self._run_task(exporter.export_video(session))
        else:
            location = exporter.export_text(session, export_format)
        print(location)

    def _convert(self, args: argparse.Namespace) -> None:
        source = get_formatter(os.path.splitext(args.input)[1])
        target = get_formatter(os.path.splitext(args.output)[1])
        timeline = source.read(args.input)
        target.write(timeline, args.output)
        logger.info(f"Converted {len(timeline)} captions: {args.input} -> {args.output}")
        print(args.output)

    def _show(self, args: argparse.Namespace, config: dict) -> None:
        timeline = get_formatter(os.path.splitext(args.input)[1]).read(args.input)
        frame = PlaybackSync.caption_frame(timeline, self._resolve_style(config, args), args.at)
        if frame is None:
            print(f"[{format_editor(args.at)}] no caption")
            return
        entry = timeline[frame.index]
        print(f"[{format_editor(entry.start)} - {format_editor(entry.end)}] #{frame.index + 1}")
        print(frame.text)
        for prop, value in frame.attributes.to_css().items():
            print(f"  {prop}: {value};")

    def run(self, argv=None) -> None:
        """Parses arguments, sets up logging, loads config, and runs the command."""
        args = self.parser.parse_args(argv)

        # --- Setup Logging ---
        log_level_name = args.log_level.upper()
        log_level = getattr(logging, log_level_name, logging.INFO)

        # Console only until the config says where log files go
        setup_logging(log_level=log_level, log_dir=None)

        # --- Load Configuration ---
        try:
            config_loader = ConfigLoader()
            config = config_loader.load_with_defaults(
                args.config,
                required=args.config != DEFAULT_CONFIG_PATH
            )
        except ConfigurationError as e:
            logger.critical(f"Failed to load configuration from {args.config}: {e}", exc_info=True)
            sys.exit(1)
        except FileNotFoundError:
            logger.critical(f"Configuration file not found: {args.config}")
            sys.exit(1)

        # --- Re-configure Logging with settings from Config ---
        setup_logging(log_level=log_level, log_dir=config.get('log_dir'), log_file=config.get('log_file', 'subedit.log'))

        try:
            if args.command == "export":
                self._export(args, config)
            elif args.command == "convert":
                self._convert(args)
            elif args.command == "show":
                self._show(args, config)
            sys.exit(0)

        except SubEditError as e:
            # Catch errors originating from our application logic
            logger.error(f"A SubEdit error occurred: {e}")
            sys.exit(1)
        except FileNotFoundError as e:
            logger.error(str(e))
            sys.exit(1)
        except KeyboardInterrupt:
            logger.warning("Process interrupted by user (Ctrl+C). Exiting.")
            sys.exit(1)
        except Exception as e:
            # Catch any other unexpected errors
            logger.critical(f"An unexpected critical error occurred at the top level: {e}", exc_info=True)
            sys.exit(2) # Use a different exit code for unexpected crashes

def main() -> None:
    """Console-script entry point."""
    CLIHandler().run()
