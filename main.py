# main.py
import sys, os
sys.path.append(os.path.dirname(__file__))  # 確保能找到 config.py

from utils.crashlog import setup_crashlog, log_exception, log_dir

import argparse
import logging, traceback
from config import (AppConfig, GridConfig, RenderConfig, AudioConfig, PlaybackConfig,
                    SNAP_POLICIES, PLACEMENT_POLICIES, PLAYBACK_ORDERS)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

def _init_logging(level: str = "INFO"):
    logs = log_dir()
    log_path = os.path.join(logs, "app.log")

    if logging.getLogger().handlers:
        return

    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO),
                        format=LOG_FORMAT, encoding="utf-8")
    try:
        from logging.handlers import RotatingFileHandler
        fh = RotatingFileHandler(log_path, maxBytes=2*1024*1024, backupCount=3, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(fh)
    except OSError as e:
        logging.warning("File logging disabled: %s", e)

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="staff-sketch",
                                 description="Click on a staff to sketch and hear a melody.")
    ap.add_argument('--snap', default='nearest', choices=SNAP_POLICIES)
    ap.add_argument('--placement', default='auto_column', choices=PLACEMENT_POLICIES)
    ap.add_argument('--order', default='insertion', choices=PLAYBACK_ORDERS)
    ap.add_argument('--step', type=float, default=6.0, help="pixels per semitone")
    ap.add_argument('--range', type=int, default=8, dest='semitone_range',
                    help="semitones above and below middle C")
    ap.add_argument('--audio', default='tone', choices=['tone', 'midi'])
    ap.add_argument('--waveform', default='triangle', choices=['sine', 'triangle', 'square', 'saw'])
    ap.add_argument('--bpm', type=float, default=120.0)
    ap.add_argument('--interval', type=float, default=0.5, help="seconds between notes on playback")
    ap.add_argument('--export-dir', default='.')
    ap.add_argument('--keys', default='', help="extra shortcuts, e.g. \"u=CLEAR,return=PLAY\"")
    ap.add_argument('--log-level', default='INFO')
    return ap

def config_from_args(args) -> AppConfig:
    return AppConfig(
        grid=GridConfig(
            step_px=args.step,
            middle_index=args.semitone_range,
            grid_steps=2 * args.semitone_range,
            snap_policy=args.snap,
            placement_policy=args.placement,
            playback_order=args.order,
        ),
        render=RenderConfig(),
        audio=AudioConfig(backend=args.audio, waveform=args.waveform),
        playback=PlaybackConfig(bpm=args.bpm, interval_s=args.interval),
        export_dir=args.export_dir,
        shortcuts=args.keys,
    )

def main(argv=None):
    ap = build_parser()
    args = ap.parse_args(argv)
    try:
        cfg = config_from_args(args)
    except ValueError as e:
        ap.error(str(e))
    setup_crashlog()
    _init_logging(args.log_level)
    logging.info("Staff Sketch starting")

    from app import App
    App(cfg).run()

if __name__ == '__main__':
    try:
        main()
    except Exception as e:
        try:
            log_exception("Top-level exception", e)
        except Exception:
            pass
        logging.error("未捕捉的例外：%s", e, exc_info=True)
        print("程式發生錯誤，請到 logs/ 資料夾看 app.log 與 error-*.txt")
        traceback.print_exc()
        sys.exit(1)
