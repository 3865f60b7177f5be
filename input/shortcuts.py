# ========================= input/shortcuts.py =========================
import pygame
from typing import Dict

# 控制面板命令（與狀態列按鈕同名）
CLEAR = "CLEAR"
PLAY = "PLAY"
EXPORT_SVG = "EXPORT SVG"
EXPORT_MIDI = "EXPORT MIDI"
QUIT = "QUIT"

COMMANDS = [CLEAR, PLAY, EXPORT_SVG, EXPORT_MIDI, QUIT]

DEFAULT_SHORTCUTS: Dict[int, str] = {
    pygame.K_c: CLEAR,
    pygame.K_BACKSPACE: CLEAR,
    pygame.K_SPACE: PLAY,
    pygame.K_p: PLAY,
    pygame.K_e: EXPORT_SVG,
    pygame.K_m: EXPORT_MIDI,
    pygame.K_ESCAPE: QUIT,
}

def keycode_to_name(k: int) -> str:
    try:
        return pygame.key.name(k)
    except Exception:
        return str(k)

def name_to_keycode(name: str) -> int:
    """把 'c', 'space' 等名稱轉回 pygame 的 keycode。"""
    try:
        return pygame.key.key_code(name)
    except Exception:
        # 允許純數字 keycode
        try:
            return int(name)
        except Exception:
            raise ValueError(f"Unknown key name: {name}")

def parse_shortcuts(text: str) -> Dict[int, str]:
    """'c=CLEAR,space=PLAY' -> keycode->command; unknown commands raise ValueError."""
    out: Dict[int, str] = {}
    for part in filter(None, (p.strip() for p in text.split(","))):
        kname, _, cmd = part.partition("=")
        cmd = cmd.strip().upper().replace("_", " ")
        if cmd not in COMMANDS:
            raise ValueError(f"Unknown command: {cmd}")
        out[name_to_keycode(kname.strip())] = cmd
    return out

def describe_shortcuts(shortcuts: Dict[int, str]) -> str:
    return "  ".join(f"{keycode_to_name(k)}={cmd}" for k, cmd in shortcuts.items())
