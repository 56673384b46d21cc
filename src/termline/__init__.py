"""termline: terminal line editing with Emacs and vi key bindings."""

# Edit actions
from termline.actions import ACTIONS, EditAction, Mode, Status, get_action

# Line buffer
from termline.buffer import CONTINUATION_PROMPT, LineBuffer

# Cancellation
from termline.cancel import Cancellation

# Byte/text conversion
from termline.codec import Decoder, Encoder

# Completion
from termline.completion import CompletionProvider, CompletionResult, complete

# Configuration
from termline.config import Config

# Connections
from termline.connection import Connection, Signal, Size

# Cursor arithmetic
from termline.cursor import move_between, row_of

# Edit modes
from termline.edit_mode import EditMode, EmacsMode, ViMode, create_edit_mode

# Errors
from termline.errors import Cancelled, ConfigError, TermlineError

# History
from termline.history import History

# Input processing
from termline.input_processor import InputProcessor, ProcessResult

# Keybindings
from termline.keybindings import (
    DEFAULT_EMACS_KEYBINDINGS,
    DEFAULT_VI_COMMAND_KEYBINDINGS,
    DEFAULT_VI_INSERT_KEYBINDINGS,
    KeyBindingTable,
)

# Keys
from termline.keys import KeyId, key_sequences

# Kill ring and undo
from termline.kill_ring import KillRing
from termline.undo_stack import UndoStack

# Prompts
from termline.prompt import ZERO_MASK, CharacterType, Color, Prompt, TerminalCharacter

# Readline
from termline.readline import Readline

# Terminal adapter
from termline.terminal import TerminalConnection

# Utilities
from termline.utils import visible_width

__all__ = [
    # Actions
    "ACTIONS",
    "EditAction",
    "Mode",
    "Status",
    "get_action",
    # Buffer
    "CONTINUATION_PROMPT",
    "LineBuffer",
    # Cancellation
    "Cancellation",
    # Codec
    "Decoder",
    "Encoder",
    # Completion
    "CompletionProvider",
    "CompletionResult",
    "complete",
    # Config
    "Config",
    # Connection
    "Connection",
    "Signal",
    "Size",
    # Cursor
    "move_between",
    "row_of",
    # Edit modes
    "EditMode",
    "EmacsMode",
    "ViMode",
    "create_edit_mode",
    # Errors
    "Cancelled",
    "ConfigError",
    "TermlineError",
    # History
    "History",
    # Input processing
    "InputProcessor",
    "ProcessResult",
    # Keybindings
    "DEFAULT_EMACS_KEYBINDINGS",
    "DEFAULT_VI_COMMAND_KEYBINDINGS",
    "DEFAULT_VI_INSERT_KEYBINDINGS",
    "KeyBindingTable",
    # Keys
    "KeyId",
    "key_sequences",
    # Kill ring and undo
    "KillRing",
    "UndoStack",
    # Prompt
    "ZERO_MASK",
    "CharacterType",
    "Color",
    "Prompt",
    "TerminalCharacter",
    # Readline
    "Readline",
    # Terminal
    "TerminalConnection",
    # Utilities
    "visible_width",
]
