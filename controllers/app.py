"""Main application controller."""

from __future__ import annotations

import logging
import tkinter as tk
from collections.abc import Callable
from pathlib import Path
from tkinter import filedialog, messagebox, ttk
from typing import Any

try:
    import sv_ttk
except ImportError:
    sv_ttk = None

from canvas.painters import Painters
from controllers.autosave import Autosaver
from controllers.editor import Editor
from controllers.gestures import Connecting, Dragging, Panning
from controllers.interaction import Interaction_Controller
from disk.drafts import File_Draft_Store
from disk.export import Exporter, default_export_name
from disk.formats import Formats
from disk.storage import IO, Parse_Error, default_settings_path
from models.settings import Settings
from models.version import get_app_version
from models.world import Time_Layer
from ui import input as input_mod
from ui.dialogs import Tk_Dialogs
from ui.header import Header_Actions, create_header
from ui.status import Status, create_status

logger = logging.getLogger(__name__)

TITLE = "Constellation"


class App:
    """Constellation application controller and UI glue."""

    def __init__(self, root: tk.Tk, settings: Settings | None = None, document_path: Path | None = None) -> None:
        """Create the application controller.

        Args;
            root: The Tk root window.
            settings: Preferences; loaded from disk when omitted.
            document_path: Optional document to open instead of the draft.
        """
        self.root = root
        self.root.title(TITLE)

        # ---------- settings ----------
        self.settings_path = default_settings_path()
        self.settings = settings or self._load_settings()
        self.document_path: Path | None = document_path

        # ---------- theme ----------
        if sv_ttk and self.settings.theme != "none":
            sv_ttk.set_theme(self.settings.theme)
        else:
            ttk.Style().theme_use("alt")

        # ---------- editor state ----------
        viewport = (self.settings.canvas_width, self.settings.canvas_height)
        self.editor = Editor(viewport=viewport)

        # ---------- header / status ----------
        self.hbar = create_header(
            self.root,
            Header_Actions(
                on_undo=self.on_undo,
                on_redo=self.on_redo,
                on_layer=self.on_layer,
                on_pan_mode=self.on_pan_mode,
                on_zoom_in=lambda: self.editor.adjust_zoom(0.1),
                on_zoom_out=lambda: self.editor.adjust_zoom(-0.1),
                on_reset_view=self.editor.reset_view,
                on_add=lambda: self.dialogs.add_member(),
                on_template=lambda: self.interaction.apply_template(),
                on_notes=lambda: self.dialogs.edit_notes(),
                on_open=self.open_document,
                on_save=self.save_document,
                on_export=self.export,
                on_clear=lambda: self.interaction.clear_all(),
                on_rename=self.on_rename,
            ),
            name=self.editor.name,
            layer=self.editor.active_layer,
        )
        self.status = Status(self.root)
        self.status_bar = create_status(self.root, self.status)

        # ---------- canvas ----------
        self.canvas = tk.Canvas(self.root, width=viewport[0], height=viewport[1], bg="white", highlightthickness=0)
        self.canvas.pack(fill="both", expand=True)
        self.painters = Painters(self.canvas)

        # ---------- collaborators ----------
        self.dialogs = Tk_Dialogs(
            self.root, self.canvas, self.editor, default_generation=self.settings.default_generation
        )
        self.interaction = Interaction_Controller(
            self.editor, self.dialogs, confirm_destructive=self.settings.confirm_destructive
        )
        self.dialogs.bind(self.interaction.perform)

        self.autosaver = Autosaver(
            self.root,
            File_Draft_Store(self.settings.draft_dir),
            self.editor.serialize_json,
            delay_ms=self.settings.autosave_ms,
            enabled=self.settings.autosave_enabled,
        )

        # ---------- initial document ----------
        self._open_initial()

        self._unsubscribe = [self.editor.subscribe(self._on_editor_change), self.editor.subscribe(self.autosaver.on_change)]

        # event routing (single source of truth)
        self.canvas.bind("<ButtonPress-1>", lambda event: (self.on_press(event), "break")[-1])
        self.canvas.bind("<B1-Motion>", lambda event: (self.on_motion(event), "break")[-1])
        self.canvas.bind("<Motion>", lambda event: (self.on_hover(event), "break")[-1])
        self.canvas.bind("<ButtonRelease-1>", lambda event: (self.on_release(event), "break")[-1])
        self.canvas.bind("<Double-Button-1>", lambda event: (self.on_double_click(event), "break")[-1])
        aqua = self._aqua()
        # aqua reports the secondary button as 2
        for seq in ("<ButtonPress-3>", "<ButtonPress-2>") if aqua else ("<ButtonPress-3>",):
            self.canvas.bind(seq, lambda event: (self.on_context(event), "break")[-1])
        self.canvas.bind("<Configure>", self._on_resize)

        self.root.bind("<MouseWheel>", self.on_wheel)
        self.root.bind("<Button-4>", self.on_wheel)
        self.root.bind("<Button-5>", self.on_wheel)

        # global keys; Command exists only on aqua
        accel = ("Control", "Command") if aqua else ("Control",)
        for mod in accel:
            self.root.bind(f"<{mod}-z>", self._on_undo_key)
            self.root.bind(f"<{mod}-y>", self._on_redo_key)
            self.root.bind(f"<{mod}-Shift-Z>", self._on_redo_key)
            self.root.bind(f"<{mod}-s>", self._on_save_key)
        self.root.bind("<KeyPress>", self._on_any_key)
        self.root.bind("<KeyRelease>", input_mod.handle_key_event)
        self.root.bind("<FocusOut>", lambda _event: input_mod.reset_mods(), add="+")

        # window close
        self.root.protocol("WM_DELETE_WINDOW", self._on_close)

        self.repaint()
        self.status.set("Ready")

    # ========= small helpers =========
    @staticmethod
    def _safe_tk_call(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except tk.TclError as exc:
            if "application has been destroyed" in str(exc):
                return None
            raise

    def _aqua(self) -> bool:
        return self.root.tk.call("tk", "windowingsystem") == "aqua"

    def _load_settings(self) -> Settings:
        try:
            return IO.load_settings(self.settings_path)
        except (OSError, ValueError) as xcp:
            logger.warning("settings load failed, using defaults: %s", xcp)
            self._safe_tk_call(messagebox.showwarning, "Settings load failed", str(xcp))
            return Settings()

    def _open_initial(self) -> None:
        if self.document_path is not None:
            try:
                self.editor.load(IO.load_document(self.document_path))
                return
            except (OSError, Parse_Error) as xcp:
                logger.warning("could not open %s: %s", self.document_path, xcp)
                self._safe_tk_call(messagebox.showerror, "Open failed", str(xcp))
                self.document_path = None
        draft = self.autosaver.restore()
        if draft is not None:
            self.editor.load(draft)
            logger.info("restored draft %r", draft.name)

    # ========= rendering =========
    def repaint(self) -> None:
        self.painters.paint(self.editor.scene())
        self._sync_header()

    def _sync_header(self) -> None:
        ed = self.editor
        self.hbar.name_var.set(ed.name)
        self.hbar.layer_var.set(ed.active_layer.value)
        self.hbar.zoom_var.set(f"{round(ed.view.zoom * 100)}%")
        self.hbar.undo.state(["!disabled" if ed.history.can_undo else "disabled"])
        self.hbar.redo.state(["!disabled" if ed.history.can_redo else "disabled"])
        self._update_title()
        self._status_hint()

    def _on_editor_change(self, dirty: bool) -> None:
        # pointer-only updates while connecting just move the rubber band
        if not dirty and isinstance(self.editor.gesture, Connecting) and self.editor.pointer is not None:
            self.painters.update_rubber_band(self.editor.scene())
            return
        self.repaint()
        if not self.autosaver.available:
            self.status.flag("autosave", "Autosave unavailable")
        else:
            self.status.unflag("autosave")

    def _status_hint(self) -> None:
        ed = self.editor
        layer = ed.active_layer.value.title()
        count = f"{len(ed.world.members)} members, {len(ed.world.connections)} connections"
        match ed.gesture:
            case Connecting():
                hint = "Click another member to connect (Esc cancels)"
            case Dragging():
                hint = "Moving"
            case Panning():
                hint = "Panning"
            case _:
                sel = ed.selected
                hint = f"Selected: {sel.name} (E edit, R rotate, C connect, Del delete, wheel turns)" if sel else ""
        self.status.set(" | ".join(s for s in (layer, count, hint) if s))

    def _on_resize(self, event: tk.Event) -> None:
        self.editor.viewport = (int(event.width), int(event.height))

    # ========= canvas events =========
    def on_press(self, event: tk.Event) -> None:
        self.canvas.focus_set()
        self.interaction.on_press(input_mod.to_pointer(event, 1))

    def on_motion(self, event: tk.Event) -> None:
        self.interaction.on_motion(input_mod.to_pointer(event, 1))

    def on_hover(self, event: tk.Event) -> None:
        if isinstance(self.editor.gesture, Connecting):
            self.interaction.on_motion(input_mod.to_pointer(event, 1))

    def on_release(self, event: tk.Event) -> None:
        self.interaction.on_release(input_mod.to_pointer(event, 1))

    def on_double_click(self, event: tk.Event) -> None:
        self.interaction.on_double_click(input_mod.to_pointer(event, 1))

    def on_context(self, event: tk.Event) -> None:
        self.interaction.on_context(input_mod.to_pointer(event, 3))

    def on_wheel(self, event: tk.Event) -> str | None:
        consumed = self.interaction.on_wheel(input_mod.to_wheel(event, self.canvas))
        return "break" if consumed else None

    def _on_any_key(self, event: tk.Event) -> str | None:
        # text entry widgets keep their own keys
        if isinstance(event.widget, (tk.Entry, ttk.Entry, tk.Text)):
            input_mod.handle_key_event(event)
            return None
        return "break" if self.interaction.on_key(input_mod.to_key(event)) else None

    # ========= header actions =========
    def on_undo(self, event: tk.Event | None = None) -> None:
        if not self.editor.undo():
            self.status.flash("Nothing to undo")

    def on_redo(self, event: tk.Event | None = None) -> None:
        if not self.editor.redo():
            self.status.flash("Nothing to redo")

    def _on_undo_key(self, event: tk.Event | None = None) -> str:
        self.on_undo()
        return "break"

    def _on_redo_key(self, event: tk.Event | None = None) -> str:
        self.on_redo()
        return "break"

    def _on_save_key(self, event: tk.Event | None = None) -> str:
        self.save_document()
        return "break"

    def on_layer(self, value: str) -> None:
        self.editor.switch_layer(Time_Layer(value))
        self.status.flash(f"{value.title()} layer")

    def on_rename(self, name: str) -> None:
        if name.strip() != self.editor.name:
            self.editor.set_name(name)

    def on_pan_mode(self, enabled: bool) -> None:
        self.interaction.set_pan_mode(enabled)
        self.canvas.configure(cursor="fleur" if enabled else "")

    # ========= files =========
    def save_document(self) -> bool:
        """Save the document as JSON.

        Returns;
            True on success.
        """
        initial = self.document_path or Path(default_export_name(self.editor.document(), Formats.json))
        path = self._safe_tk_call(
            filedialog.asksaveasfilename,
            parent=self.root,
            title="Save constellation",
            defaultextension=".json",
            filetypes=Formats.filetypes(Formats.json),
            initialdir=initial.parent,
            initialfile=initial.name,
        )
        if not path:
            return False
        try:
            IO.save_document(self.editor.serialize(), Path(path))
        except OSError as xcp:
            self._safe_tk_call(messagebox.showerror, "Save failed", str(xcp))
            return False
        self.document_path = Path(path)
        self._update_title()
        self.status.flash(f"Saved {self.document_path.name}")
        return True

    def open_document(self) -> None:
        """Replace the document with one read from disk. Failures leave the current one intact."""
        path = self._safe_tk_call(
            filedialog.askopenfilename,
            parent=self.root,
            title="Open constellation",
            filetypes=[*Formats.filetypes(Formats.json), ("All files", "*.*")],
        )
        if not path:
            return
        try:
            doc = IO.load_document(Path(path))
        except (OSError, Parse_Error) as xcp:
            logger.warning("open failed for %s: %s", path, xcp)
            self.dialogs.error(f"Could not load the file.\n\n{xcp}")
            return
        self.editor.load(doc)
        self.document_path = Path(path)
        self._update_title()
        self.status.flash(f"Opened {self.document_path.name}")

    def export(self) -> None:
        """Export as PNG (active layer), Markdown summary, or JSON."""
        doc = self.editor.serialize()
        path = self._safe_tk_call(
            filedialog.asksaveasfilename,
            parent=self.root,
            title="Export",
            defaultextension=".png",
            filetypes=Formats.filetypes(Formats.png, Formats.md, Formats.json),
            initialfile=default_export_name(doc, Formats.png),
        )
        if not path:
            return

        output_path = Path(path)
        if not Formats.check(output_path):
            self._safe_tk_call(
                messagebox.showerror,
                "Invalid filetype",
                f"Choose one of: {', '.join(Formats)}",
            )
            return
        try:
            Exporter.output(doc, output_path)
        except (OSError, ValueError) as xcp:
            self._safe_tk_call(messagebox.showerror, "Export failed", str(xcp))
            return
        self.status.flash(f"Exported {output_path.name}")

    # ========= lifecycle =========
    def _on_close(self) -> None:
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        if self.autosaver.pending:
            self.autosaver.cancel()
            self.autosaver.flush()
        self.autosaver.close()
        self.root.destroy()

    def _update_title(self) -> None:
        where = f" ({self.document_path.name})" if self.document_path else ""
        self.root.title(f"{TITLE} {get_app_version()} - {self.editor.name}{where}")
