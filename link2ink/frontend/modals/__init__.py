# -*- coding: utf-8 -*-
"""
Modal screens for the Link2Ink TUI.

- modal_base: BaseModal, MODAL_BASE_CSS
- api_key_modal: ApiKeyModal (blocking while the session is locked)
- intro_modal: IntroOverlay
- shortcuts_modal: KeyboardShortcutsModal
"""

from .api_key_modal import ApiKeyModal
from .intro_modal import IntroOverlay
from .modal_base import MODAL_BASE_CSS, BaseModal
from .shortcuts_modal import KeyboardShortcutsModal

__all__ = [
    "ApiKeyModal",
    "BaseModal",
    "IntroOverlay",
    "KeyboardShortcutsModal",
    "MODAL_BASE_CSS",
]
