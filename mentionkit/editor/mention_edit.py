"""Text edit widget that tracks mentions while the user types."""
from __future__ import annotations

from typing import Any, Callable, Iterable

from PySide6.QtCore import QMimeData, Qt, Signal
from PySide6.QtGui import (
    QFocusEvent,
    QInputMethodEvent,
    QKeyEvent,
    QKeySequence,
    QTextCharFormat,
    QTextCursor,
)
from PySide6.QtWidgets import QTextEdit, QWidget

from mentionkit.core.config import ConfigManager
from mentionkit.editor.formats import char_format_for
from mentionkit.mentions.cooldown import CooldownTimer
from mentionkit.mentions.host import MentionDelegate
from mentionkit.mentions.listener import MentionListener, RangeLike
from mentionkit.mentions.mention import Mention
from mentionkit.mentions.options import MentionOptions, StyleTag
from mentionkit.mentions.ranges import TextRange


def utf16_length(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


def position_for_index(text: str, index: int) -> int:
    """Convert a ``str`` index into a ``QTextDocument`` (UTF-16) position."""

    return utf16_length(text[:index])


def index_for_position(text: str, position: int) -> int:
    """Convert a ``QTextDocument`` (UTF-16) position into a ``str`` index."""

    units = 0
    for index, char in enumerate(text):
        if units >= position:
            return index
        units += 2 if ord(char) > 0xFFFF else 1
    return len(text)


# Standard key sequences QTextEdit handles as deletions.
DELETION_KEYS = (
    QKeySequence.StandardKey.DeleteStartOfWord,
    QKeySequence.StandardKey.DeleteEndOfWord,
    QKeySequence.StandardKey.DeleteEndOfLine,
    QKeySequence.StandardKey.DeleteCompleteLine,
)


class MentionTextEdit(QTextEdit):
    """Plain-text ``QTextEdit`` that keeps mentions atomic.

    Every edit is reported to a :class:`MentionListener` before Qt applies it.
    Connect ``showMentionsRequested`` and ``hideMentionsRequested`` to a
    candidate picker and call :meth:`add_mention` with the chosen entry.
    """

    showMentionsRequested = Signal(str, str)
    hideMentionsRequested = Signal()

    def __init__(
        self,
        parent: QWidget | None = None,
        *,
        config: ConfigManager | None = None,
        options: MentionOptions | None = None,
        delegate: MentionDelegate | None = None,
        return_handler: Callable[[], bool] | None = None,
        timer: CooldownTimer | None = None,
    ) -> None:
        super().__init__(parent)
        self.setAcceptRichText(False)
        # Undo and drag-move change text without passing through the listener.
        self.setUndoRedoEnabled(False)
        self.setAcceptDrops(False)
        self.return_handler = return_handler

        if options is None:
            options = MentionOptions.from_config(config) if config else MentionOptions()
        self.listener = MentionListener(
            self,
            hide_mentions=self._emit_hide,
            did_handle_mention_on_return=self._handle_return,
            show_mentions_list=self._emit_show,
            options=options,
            delegate=delegate,
            timer=timer or CooldownTimer(self),
        )
        self.cursorPositionChanged.connect(self.listener.did_change_selection)
        self.textChanged.connect(self.listener.did_change)

    # Mention API -------------------------------------------------------
    @property
    def mentions(self) -> list[Mention]:
        return self.listener.mentions

    def add_mention(self, payload: Any) -> bool:
        return self.listener.add_mention(payload)

    def insert_existing_mentions(self, existing: Iterable[tuple[Any, RangeLike]]) -> list[tuple[Any, TextRange]]:
        return self.listener.insert_existing_mentions(existing)

    def reset_mentions(self) -> None:
        self.listener.reset()

    def setPlainText(self, text: str) -> None:  # type: ignore[override]
        super().setPlainText(text)
        self.listener.reset()

    def format_at(self, index: int) -> QTextCharFormat:
        """Return the character format of the character at ``index``."""

        cursor = QTextCursor(self.document())
        cursor.setPosition(position_for_index(self.toPlainText(), index + 1))
        return cursor.charFormat()

    # MentionHost -------------------------------------------------------
    def text(self) -> str:
        return self.toPlainText()

    def selection(self) -> TextRange:
        cursor = self.textCursor()
        text = self.toPlainText()
        start = index_for_position(text, cursor.selectionStart())
        end = index_for_position(text, cursor.selectionEnd())
        return TextRange(start, end - start)

    def set_selection(self, text_range: TextRange) -> None:
        self.setTextCursor(self._cursor_for(text_range))

    def replace(self, text_range: TextRange, text: str) -> None:
        cursor = self._cursor_for(text_range)
        cursor.insertText(text)
        self.setTextCursor(cursor)

    def apply_style(self, style: StyleTag, text_range: TextRange) -> None:
        if text_range.length <= 0:
            return
        self._cursor_for(text_range).mergeCharFormat(char_format_for(style))

    def reset_typing_style(self, style: StyleTag) -> None:
        # With a selection Qt would restyle the selected text instead.
        if self.textCursor().hasSelection():
            return
        self.mergeCurrentCharFormat(char_format_for(style))

    def scroll_into_view(self, text_range: TextRange) -> None:
        self.ensureCursorVisible()

    def _cursor_for(self, text_range: TextRange) -> QTextCursor:
        text = self.toPlainText()
        cursor = QTextCursor(self.document())
        cursor.setPosition(position_for_index(text, text_range.location))
        cursor.setPosition(position_for_index(text, text_range.end), QTextCursor.MoveMode.KeepAnchor)
        return cursor

    def _range_for_cursor(self, cursor: QTextCursor) -> TextRange:
        text = self.toPlainText()
        start = index_for_position(text, cursor.selectionStart())
        end = index_for_position(text, cursor.selectionEnd())
        return TextRange(start, end - start)

    # Qt events ---------------------------------------------------------
    def keyPressEvent(self, event: QKeyEvent) -> None:  # type: ignore[override]
        if event.matches(QKeySequence.StandardKey.Cut):
            self._cut_selection()
            return
        if self.isReadOnly():
            super().keyPressEvent(event)
            return
        for standard_key in DELETION_KEYS:
            if event.matches(standard_key):
                self.delete_for_key(standard_key)
                return
        edit = self._edit_for_key(event)
        if edit is None or self.listener.should_change_text(*edit):
            super().keyPressEvent(event)

    def inputMethodEvent(self, event: QInputMethodEvent) -> None:  # type: ignore[override]
        commit = event.commitString()
        if self.isReadOnly() or not (commit or event.replacementLength()):
            super().inputMethodEvent(event)
            return
        if self.listener.should_change_text(self._range_for_commit(event), commit):
            super().inputMethodEvent(event)
        else:
            # The listener applied the commit; keep only the preedit part.
            super().inputMethodEvent(QInputMethodEvent(event.preeditString(), event.attributes()))

    def insertFromMimeData(self, source: QMimeData) -> None:  # type: ignore[override]
        text = source.text() if source.hasText() else ""
        if not text:
            return
        if self.listener.should_change_text(self.selection(), text):
            super().insertFromMimeData(source)

    def delete_for_key(self, standard_key: QKeySequence.StandardKey) -> None:
        """Delete what ``standard_key`` removes in a ``QTextEdit``, through the listener."""

        deleted = self._range_for_deletion(standard_key)
        if deleted is None:
            return
        if self.listener.should_change_text(deleted, ""):
            self.replace(deleted, "")

    def focusInEvent(self, event: QFocusEvent) -> None:  # type: ignore[override]
        super().focusInEvent(event)
        if self.listener.should_begin_editing():
            self.listener.did_begin_editing()

    def focusOutEvent(self, event: QFocusEvent) -> None:  # type: ignore[override]
        super().focusOutEvent(event)
        if self.listener.should_end_editing():
            self.listener.did_end_editing()

    def _edit_for_key(self, event: QKeyEvent) -> tuple[TextRange, str] | None:
        """Describe the edit a key press would make, or ``None`` if it makes none."""

        selection = self.selection()
        key = event.key()
        if key in (Qt.Key.Key_Return, Qt.Key.Key_Enter):
            return selection, "\n"
        if key == Qt.Key.Key_Backspace:
            return self._deletion(selection, QTextCursor.MoveOperation.PreviousCharacter)
        if key == Qt.Key.Key_Delete:
            return self._deletion(selection, QTextCursor.MoveOperation.NextCharacter)
        if key == Qt.Key.Key_Tab and not self.tabChangesFocus():
            return selection, "\t"

        text = event.text()
        modifiers = event.modifiers()
        if modifiers & (Qt.KeyboardModifier.ControlModifier | Qt.KeyboardModifier.MetaModifier):
            return None
        if text and text.isprintable():
            return selection, text
        return None

    def _deletion(self, selection: TextRange, operation: QTextCursor.MoveOperation) -> tuple[TextRange, str] | None:
        if selection.length:
            return selection, ""
        cursor = self.textCursor()
        cursor.movePosition(operation, QTextCursor.MoveMode.KeepAnchor)
        deleted = self._range_for_cursor(cursor)
        if not deleted.length:
            return None
        return deleted, ""

    def _range_for_deletion(self, standard_key: QKeySequence.StandardKey) -> TextRange | None:
        selection = self.selection()
        if selection.length:
            return selection
        cursor = self.textCursor()
        keep = QTextCursor.MoveMode.KeepAnchor
        if standard_key == QKeySequence.StandardKey.DeleteCompleteLine:
            cursor.select(QTextCursor.SelectionType.BlockUnderCursor)
        elif standard_key == QKeySequence.StandardKey.DeleteStartOfWord:
            cursor.movePosition(QTextCursor.MoveOperation.PreviousWord, keep)
        elif standard_key == QKeySequence.StandardKey.DeleteEndOfWord:
            cursor.movePosition(QTextCursor.MoveOperation.NextWord, keep)
        else:
            # At the end of a line, delete the line break instead.
            cursor.movePosition(QTextCursor.MoveOperation.EndOfBlock, keep)
            if not cursor.hasSelection():
                cursor.movePosition(QTextCursor.MoveOperation.NextCharacter, keep)
        deleted = self._range_for_cursor(cursor)
        return deleted if deleted.length else None

    def _range_for_commit(self, event: QInputMethodEvent) -> TextRange:
        """Return the ``str`` range an input method commit replaces."""

        cursor = self.textCursor()
        if not event.replacementLength() and cursor.hasSelection():
            return self._range_for_cursor(cursor)
        start = cursor.position() + event.replacementStart()
        end = start + event.replacementLength()
        document_end = self.document().characterCount() - 1
        cursor.setPosition(max(0, min(start, document_end)))
        cursor.setPosition(max(0, min(end, document_end)), QTextCursor.MoveMode.KeepAnchor)
        return self._range_for_cursor(cursor)

    def _cut_selection(self) -> None:
        selection = self.selection()
        if not selection.length or self.isReadOnly():
            return
        self.copy()
        if self.listener.should_change_text(selection, ""):
            self.textCursor().removeSelectedText()

    # Listener callbacks ------------------------------------------------
    def _emit_show(self, filter_string: str, trigger: str) -> None:
        self.showMentionsRequested.emit(filter_string, trigger)

    def _emit_hide(self) -> None:
        self.hideMentionsRequested.emit()

    def _handle_return(self) -> bool:
        return bool(self.return_handler()) if self.return_handler else False
