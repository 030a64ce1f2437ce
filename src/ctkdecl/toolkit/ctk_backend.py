from __future__ import annotations

"""
CustomTkinter Rendering Backend.

Realizes widget handles as customtkinter widgets (falling back to plain Tk/ttk
widgets for kinds customtkinter does not provide). Geometry is absolute and
applied with `place`; customtkinter widgets take their size through
`configure`, Tk widgets through `place`.
"""

import logging
import tkinter as tk
from tkinter import colorchooser, ttk
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple

import customtkinter as ctk
from PIL import Image

from ctkdecl.domain import constants as const
from ctkdecl.domain.styles import FrameStyle
from ctkdecl.toolkit.backend import Backend

if TYPE_CHECKING:
    from ctkdecl.toolkit.widgets import Widget, Window

logger = logging.getLogger(__name__)

# Native kinds realized by plain Tk/ttk widgets (size given to place()).
_TK_KINDS = ("listbox", "treeview", "spinbox", "canvas")

_CHART_PALETTE = ("#1f6aa5", "#2fa572", "#d35b58", "#e8a33d", "#8c62c7", "#4aa3a8")


class _Tooltip:
    """Hover tooltip shown in a borderless toplevel."""

    def __init__(self, widget: tk.Misc, text: str) -> None:
        self.widget = widget
        self.text = text
        self._tip: Optional[tk.Toplevel] = None
        widget.bind("<Enter>", self._show, add="+")
        widget.bind("<Leave>", self._hide, add="+")

    def _show(self, _event: Any = None) -> None:
        if self._tip is not None or not self.text:
            return
        x = self.widget.winfo_rootx() + 12
        y = self.widget.winfo_rooty() + self.widget.winfo_height() + 4
        self._tip = tk.Toplevel(self.widget)
        self._tip.wm_overrideredirect(True)
        self._tip.wm_geometry(f"+{x}+{y}")
        tk.Label(self._tip, text=self.text, background="#ffffe0", relief="solid", borderwidth=1).pack()

    def _hide(self, _event: Any = None) -> None:
        if self._tip is not None:
            self._tip.destroy()
            self._tip = None


class CtkBackend(Backend):
    """
    customtkinter implementation of the rendering backend.

    Args:
        appearance_mode: 'system', 'light' or 'dark'.
        color_theme: Built-in theme name ('blue', 'green', 'dark-blue').
    """

    name = "customtkinter"

    def __init__(self, appearance_mode: str = "system", color_theme: str = "blue") -> None:
        ctk.set_appearance_mode(appearance_mode)
        ctk.set_default_color_theme(color_theme)
        self.root: Optional[ctk.CTk] = None
        self._extras: Dict[int, Dict[str, Any]] = {}
        self._tooltips: Dict[int, _Tooltip] = {}
        self._shortcuts: Dict[Tuple[str, str], List["Widget"]] = {}

    # -------------------------------------------------------------------------
    # Widget lifecycle
    # -------------------------------------------------------------------------

    def create(self, handle: "Widget") -> Any:
        kind = handle.native_kind
        self._extras[id(handle)] = {}

        if kind == "window":
            if self.root is None:
                self.root = ctk.CTk()
                native = self.root
            else:
                native = ctk.CTkToplevel(self.root)
            native.geometry(f"{handle.w}x{handle.h}")
            native.protocol("WM_DELETE_WINDOW", lambda: self._close_window(native))
            return native

        master = self._master_of(handle)
        opts = handle.native_options
        on_event = handle._on_native_event

        if kind == "label":
            return ctk.CTkLabel(master, text="")
        if kind == "button":
            return ctk.CTkButton(master, text="", command=lambda: self._on_button(handle))
        if kind == "entry":
            native = ctk.CTkEntry(master, show="*" if opts.get("input_type") == "secret" else "")
            native.bind("<Return>", lambda _e: on_event(), add="+")
            if opts.get("readonly"):
                native.configure(state="readonly")
            return native
        if kind == "textbox":
            native = ctk.CTkTextbox(master, wrap="word")
            if opts.get("readonly"):
                native.configure(state="disabled")
            else:
                native.bind("<KeyRelease>", lambda _e: self._on_text_edit(handle), add="+")
            return native
        if kind == "menubar":
            return ctk.CTkFrame(master, corner_radius=0)
        if kind == "optionmenu":
            if opts.get("editable"):
                return ctk.CTkComboBox(master, values=[], command=lambda _v: on_event())
            return ctk.CTkOptionMenu(master, values=[], command=lambda _v: on_event())
        if kind == "slider":
            return ctk.CTkSlider(
                master,
                orientation="horizontal" if opts.get("orientation") == "horizontal" else "vertical",
                command=lambda _v: on_event(),
            )
        if kind == "progressbar":
            return ctk.CTkProgressBar(master)
        if kind == "listbox":
            native = tk.Listbox(master, selectmode="extended" if opts.get("multi") else "browse",
                                exportselection=False)
            native.bind("<<ListboxSelect>>", lambda _e: on_event(), add="+")
            return native
        if kind == "treeview":
            native = ttk.Treeview(master, show="tree headings")
            native.bind("<<TreeviewSelect>>", lambda _e: on_event(), add="+")
            return native
        if kind == "spinbox":
            return tk.Spinbox(master, command=on_event)
        if kind == "canvas":
            return tk.Canvas(master, highlightthickness=0, background="white")
        if kind == "colorchooser":
            return ctk.CTkButton(master, text="", command=lambda: self._choose_color(handle))
        if kind == "tabview":
            native = ctk.CTkFrame(master)
            bar = ctk.CTkSegmentedButton(native, values=[], command=lambda v: self._on_tab(handle, v))
            bar.place(x=0, y=0)
            self._extras[id(handle)]["tab_bar"] = bar
            return native
        if kind == "scrollframe":
            return ctk.CTkScrollableFrame(master, orientation="vertical")
        # frame and any unmapped container kind
        return ctk.CTkFrame(master)

    def configure(self, handle: "Widget", **options: Any) -> None:
        native = handle.native
        extras = self._extras.setdefault(id(handle), {})
        kind = handle.native_kind
        is_tk = kind in _TK_KINDS
        kw: Dict[str, Any] = {}

        for key, value in options.items():
            if key == "title":
                native.title(value)
            elif key == "label":
                if kind in ("label", "button", "colorchooser"):
                    kw["text"] = value
                elif kind == "window":
                    native.title(value)
                elif kind == "treeview":
                    native.heading("#0", text=value)
            elif key == "color":
                kw["background" if is_tk else "fg_color"] = value
            elif key == "label_color":
                if not is_tk and kind not in ("window", "frame", "scrollframe", "tabview", "menubar"):
                    kw["text_color"] = value
            elif key == "selection_color":
                if kind == "button":
                    kw["hover_color"] = value
                elif kind in ("slider", "progressbar"):
                    kw["progress_color"] = value
                elif kind == "listbox":
                    kw["selectbackground"] = value
            elif key == "text_color":
                if is_tk:
                    kw["foreground"] = value
                elif kind in ("entry", "textbox", "optionmenu"):
                    kw["text_color"] = value
            elif key in ("label_font", "text_font"):
                font, size = value
                if font is None:
                    continue
                family, weight, slant = font
                if is_tk:
                    kw["font"] = (family, size, weight if weight == "bold" else "normal")
                elif kind not in ("window", "frame", "scrollframe", "tabview", "menubar", "progressbar", "slider"):
                    kw["font"] = ctk.CTkFont(family=family, size=size, weight=weight, slant=slant)
            elif key == "tooltip":
                tip = self._tooltips.get(id(handle))
                if tip is None:
                    self._tooltips[id(handle)] = _Tooltip(native, value)
                else:
                    tip.text = value
            elif key == "image":
                extras["image"] = value
                if kind in ("label", "button"):
                    kw["image"] = self._as_ctk_image(value)
            elif key == "deimage":
                extras["deimage"] = value
            elif key == "align":
                if kind in ("label", "button"):
                    kw["anchor"] = value
            elif key in ("frame", "down_frame"):
                if key == "down_frame":
                    extras["down_frame"] = value
                    continue
                kw.update(self._frame_options(value, is_tk))
            elif key == "range":
                lo, hi, step = value
                if kind == "slider":
                    kw.update(from_=lo, to=hi)
                    if step and hi != lo:
                        kw["number_of_steps"] = max(int(round(abs(hi - lo) / step)), 1)
                elif kind == "spinbox":
                    kw.update(from_=lo, to=hi, increment=step or 1)
            elif key == "slider_size":
                if kind == "slider":
                    length = handle.h if handle.native_options.get("orientation") != "horizontal" else handle.w
                    kw["button_length"] = max(int(length * value), 1)
            elif key == "items":
                self._set_items(handle, list(value))
            elif key == "text":
                if kind == "textbox":
                    self._replace_text(native, value)
                elif kind == "entry":
                    self.write_value(handle, value)
            elif key == "shape":
                rows, cols = value
                native["columns"] = [f"c{i}" for i in range(cols)]
                native.delete(*native.get_children())
                for r in range(rows):
                    native.insert("", "end", text=str(r + 1), values=[""] * cols)
            elif key == "entries":
                extras["entries"] = value
                self._draw_chart(handle)
            elif key == "selected":
                self._select_tab(handle, value)
            else:
                logger.debug(f"Ctk Backend: Unhandled option '{key}' on '{handle.kind}'.")

        if kw:
            self._safe_configure(native, **kw)

    def place(self, handle: "Widget") -> None:
        native = handle.native
        if handle.native_kind == "window":
            native.geometry(f"{handle.w}x{handle.h}")
            return
        if not handle.visible:
            return
        if handle.native_kind in _TK_KINDS:
            native.place(x=handle.x, y=handle.y, width=handle.w, height=handle.h)
        else:
            self._safe_configure(native, width=handle.w, height=handle.h)
            native.place(x=handle.x, y=handle.y)
        if handle.native_kind == "canvas":
            self._draw_chart(handle)
        parent = handle.parent
        if parent is not None and parent.native_kind == "scrollframe":
            self._fit_scroll_content(parent, handle)

    def set_visible(self, handle: "Widget", visible: bool) -> None:
        native = handle.native
        if handle.native_kind == "window":
            if visible:
                native.deiconify()
            else:
                native.withdraw()
        elif visible:
            self.place(handle)
        else:
            native.place_forget()

    def set_active(self, handle: "Widget", active: bool) -> None:
        extras = self._extras.get(id(handle), {})
        if handle.native_kind in ("window", "frame", "scrollframe", "tabview", "menubar", "canvas"):
            return
        self._safe_configure(handle.native, state="normal" if active else "disabled")
        deimage = extras.get("deimage")
        if deimage is not None and handle.native_kind in ("label", "button"):
            image = extras.get("image") if active else deimage
            if image is not None:
                self._safe_configure(handle.native, image=self._as_ctk_image(image))

    def destroy(self, handle: "Widget") -> None:
        self._extras.pop(id(handle), None)
        self._tooltips.pop(id(handle), None)
        for bound in self._shortcuts.values():
            if handle in bound:
                bound.remove(handle)
        if handle.native is self.root:
            self.root = None
            self._shortcuts.clear()
        handle.native.destroy()

    # -------------------------------------------------------------------------
    # Values and input
    # -------------------------------------------------------------------------

    def read_value(self, handle: "Widget") -> Any:
        native = handle.native
        kind = handle.native_kind
        extras = self._extras.get(id(handle), {})
        if kind == "entry":
            return native.get()
        if kind == "textbox":
            return native.get("1.0", "end-1c")
        if kind in ("button", "colorchooser"):
            return extras.get("value")
        if kind == "optionmenu":
            current = native.get()
            items: List[str] = extras.get("items", [])
            return items.index(current) if current in items else -1
        if kind in ("slider", "progressbar"):
            return float(native.get())
        if kind == "spinbox":
            try:
                return float(native.get())
            except ValueError:
                return 0.0
        if kind == "listbox":
            return list(native.curselection())
        if kind == "treeview":
            return list(native.selection())
        return extras.get("value")

    def write_value(self, handle: "Widget", value: Any) -> None:
        native = handle.native
        kind = handle.native_kind
        extras = self._extras.setdefault(id(handle), {})
        if kind == "entry":
            readonly = native.cget("state") == "readonly"
            if readonly:
                native.configure(state="normal")
            native.delete(0, "end")
            native.insert(0, "" if value is None else str(value))
            if readonly:
                native.configure(state="readonly")
        elif kind == "textbox":
            self._replace_text(native, "" if value is None else str(value))
        elif kind == "optionmenu":
            items = extras.get("items", [])
            native.set(items[value] if isinstance(value, int) and 0 <= value < len(items) else "")
        elif kind in ("slider", "progressbar"):
            native.set(float(value))
        elif kind == "spinbox":
            native.delete(0, "end")
            native.insert(0, str(value))
        elif kind == "listbox":
            native.selection_clear(0, "end")
            for index in value:
                native.selection_set(index)
        elif kind == "colorchooser":
            extras["value"] = value
            self._safe_configure(native, fg_color=value)
        else:
            extras["value"] = value

    def bind_shortcut(self, handle: "Widget", sequence: str) -> None:
        window = handle.window()
        target = window.native if window is not None else self.root
        if target is None:
            logger.debug(f"Ctk Backend: No window to bind shortcut {sequence} for '{handle.kind}'.")
            return

        key = (str(target), sequence)
        bound = self._shortcuts.get(key)
        if bound is not None:
            bound.append(handle)
            return

        bound = [handle]

        def _fire(_event: Any) -> None:
            for w in list(bound):
                if w.native is not None and w.visible_r() and w.active:
                    w.do_callback()

        try:
            target.bind(sequence, _fire, add="+")
        except tk.TclError as e:
            logger.debug(f"Ctk Backend: Rejected key sequence {sequence}: {e}")
            return
        self._shortcuts[key] = bound

    def load_image(self, path: str) -> Image.Image:
        with Image.open(path) as img:
            img.load()
            return img.copy()

    # -------------------------------------------------------------------------
    # Windows and event loop
    # -------------------------------------------------------------------------

    def show(self, window: "Window") -> None:
        window.native.deiconify()
        window.native.lift()

    def add_timeout(self, ms: int, callback: Callable[[], None]) -> None:
        if self.root is None:
            raise RuntimeError("Cannot schedule a timer before the first window exists.")
        self.root.after(ms, callback)

    def redraw(self) -> None:
        if self.root is not None:
            self.root.update_idletasks()

    def run(self) -> None:
        if self.root is None:
            raise RuntimeError("No window to run.")
        self.root.mainloop()

    def quit(self) -> None:
        if self.root is not None:
            self.root.quit()

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    def _master_of(self, handle: "Widget") -> Any:
        parent = handle.parent
        if parent is None:
            if self.root is None:
                raise RuntimeError(f"'{handle.kind}' has no window to attach to.")
            return self.root
        return parent.native

    def _close_window(self, native: Any) -> None:
        if native is self.root:
            native.quit()
        else:
            native.withdraw()

    @staticmethod
    def _safe_configure(native: Any, **kw: Any) -> None:
        try:
            native.configure(**kw)
        except (ValueError, tk.TclError) as e:
            logger.debug(f"Ctk Backend: {type(native).__name__} rejected {sorted(kw)}: {e}")

    @staticmethod
    def _fit_scroll_content(scroll: "Widget", placed: "Widget") -> None:
        # Placed children do not propagate size, so the inner frame is sized to cover them
        items = scroll.children + [placed]  # type: ignore[attr-defined]
        width = max([scroll.w] + [c.x + c.w for c in items])
        height = max([scroll.h] + [c.y + c.h for c in items])
        tk.Frame.configure(scroll.native, width=width, height=height)

    @staticmethod
    def _frame_options(style: FrameStyle, is_tk: bool) -> Dict[str, Any]:
        if is_tk:
            return {"relief": style.relief, "borderwidth": style.border_width}
        return {"border_width": style.border_width, "corner_radius": style.corner_radius}

    @staticmethod
    def _as_ctk_image(image: Image.Image) -> ctk.CTkImage:
        return ctk.CTkImage(light_image=image, dark_image=image, size=image.size)

    @staticmethod
    def _replace_text(native: Any, text: str) -> None:
        state = native.cget("state")
        native.configure(state="normal")
        native.delete("1.0", "end")
        native.insert("1.0", text)
        native.configure(state=state)

    def _on_button(self, handle: "Widget") -> None:
        if getattr(handle, "toggle", False) and not getattr(handle, "radio", False):
            extras = self._extras.setdefault(id(handle), {})
            extras["value"] = not extras.get("value", False)
        handle._on_native_event()

    def _on_text_edit(self, handle: "Widget") -> None:
        handle._on_native_edit(handle.native.get("1.0", "end-1c"))  # type: ignore[attr-defined]
        if handle.trigger & const.WHEN_CHANGED:
            handle._on_native_event()

    def _choose_color(self, handle: "Widget") -> None:
        _rgb, hex_value = colorchooser.askcolor(parent=handle.native)
        if hex_value:
            self.write_value(handle, hex_value)
            handle._on_native_event()

    def _set_items(self, handle: "Widget", items: List[str]) -> None:
        native = handle.native
        kind = handle.native_kind
        self._extras.setdefault(id(handle), {})["items"] = items
        if kind == "optionmenu":
            native.configure(values=items)
        elif kind == "listbox":
            native.delete(0, "end")
            for line in items:
                native.insert("end", line)
        elif kind == "treeview":
            native.delete(*native.get_children())
            for path in items:
                parent, _, name = path.rpartition("/")
                native.insert(parent, "end", iid=path, text=name, open=True)
        elif kind == "menubar":
            self._rebuild_menubar(handle, items)

    def _rebuild_menubar(self, handle: "Widget", paths: List[str]) -> None:
        native = handle.native
        for child in native.winfo_children():
            child.destroy()
        menus: Dict[str, List[str]] = {}
        for path in paths:
            top, _, rest = path.partition("/")
            menus.setdefault(top, []).append(rest or top)
        x = 0
        for top, entries in menus.items():
            menu = ctk.CTkOptionMenu(
                native, values=entries, width=100, height=handle.h,
                command=lambda v, t=top: handle.activate_item(f"{t}/{v}" if v != t else t),  # type: ignore[attr-defined]
            )
            menu.set(top)
            menu.place(x=x, y=0)
            x += 104

    def _on_tab(self, handle: "Widget", value: str) -> None:
        for page in handle.children:  # type: ignore[attr-defined]
            if page.label == value:
                handle.select(page)  # type: ignore[attr-defined]
                return

    def _select_tab(self, handle: "Widget", index: int) -> None:
        pages = handle.children  # type: ignore[attr-defined]
        bar = self._extras.get(id(handle), {}).get("tab_bar")
        if bar is not None:
            bar.configure(values=[p.label or f"Tab {i + 1}" for i, p in enumerate(pages)])
            if 0 <= index < len(pages):
                bar.set(pages[index].label or f"Tab {index + 1}")
        for i, page in enumerate(pages):
            if i == index:
                page.native.place(x=page.x, y=page.y)
                page.native.lift()
            else:
                page.native.place_forget()

    def _draw_chart(self, handle: "Widget") -> None:
        canvas = handle.native
        entries = self._extras.get(id(handle), {}).get("entries", [])
        canvas.delete("all")
        if not entries:
            return
        peak = max(abs(v) for v, _, _ in entries) or 1.0
        bar_w = handle.w / len(entries)
        for i, (value, label, color) in enumerate(entries):
            bar_h = (handle.h - 20) * abs(value) / peak
            x0 = i * bar_w + 2
            fill = color or _CHART_PALETTE[i % len(_CHART_PALETTE)]
            canvas.create_rectangle(x0, handle.h - 20 - bar_h, x0 + bar_w - 4, handle.h - 20, fill=fill, width=0)
            canvas.create_text(x0 + bar_w / 2 - 2, handle.h - 10, text=label)
