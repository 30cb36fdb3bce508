"""Interface Tkinter principale."""

from __future__ import annotations

import tkinter as tk
from tkinter import ttk

import sv_ttk
from PIL import Image, ImageDraw, ImageFont, ImageTk

from vitrine.controller import SessionController
from vitrine.models import Credentials
from vitrine.state import StateSnapshot

ACCENT_COLOR = "#F59E0B"
BACKGROUND_COLOR = "#121212"
CARD_COLOR = "#181818"
STATUS_NEUTRAL_COLOR = "#B3B3B3"
STATUS_ERROR_COLOR = "#F87171"
STATUS_SUCCESS_COLOR = "#34D399"
LISTBOX_SELECTION_FG = "#000000"
FAVORITE_MARK = "★"
AVATAR_SIZE = 48
WINDOW_MIN_SIZE = (720, 560)


class MainWindow:
    """Fenêtre principale de l'application."""

    def __init__(self, controller: SessionController) -> None:
        self._controller = controller
        self._snapshot = controller.snapshot()

        self.root = tk.Tk()
        self.root.title("Vitrine – Catalogue")
        self.root.minsize(*WINDOW_MIN_SIZE)

        sv_ttk.set_theme("dark")
        self.root.configure(bg=BACKGROUND_COLOR)
        self._configure_styles()

        self._username_var = tk.StringVar()
        self._password_var = tk.StringVar()
        self._catalog_error_var = tk.StringVar()
        self._form_error_var = tk.StringVar()
        self._avatar_photo: ImageTk.PhotoImage | None = None
        self._visible_product_ids: list[object] = []

        self.root.columnconfigure(0, weight=1)
        self.root.rowconfigure(0, weight=0)
        self.root.rowconfigure(1, weight=1)

        self._build_header()
        self._build_main_area()

        self._username_var.trace_add("write", self._on_credentials_changed)
        self._password_var.trace_add("write", self._on_credentials_changed)

    # --------------------------------------------------------------------- UI -
    def _configure_styles(self) -> None:
        style = ttk.Style()
        style.configure("Main.TFrame", background=BACKGROUND_COLOR)
        style.configure("Header.TFrame", background=BACKGROUND_COLOR)
        style.configure("Card.TFrame", background=CARD_COLOR)
        style.configure(
            "HeaderTitle.TLabel",
            background=BACKGROUND_COLOR,
            foreground="#FFFFFF",
            font=("Helvetica", 20, "bold"),
        )
        style.configure(
            "Section.TLabel",
            background=CARD_COLOR,
            foreground="#FFFFFF",
            font=("Helvetica", 12, "bold"),
        )
        style.configure(
            "Hint.TLabel",
            background=CARD_COLOR,
            foreground=STATUS_NEUTRAL_COLOR,
            font=("Helvetica", 10),
        )
        style.configure(
            "Error.TLabel",
            background=CARD_COLOR,
            foreground=STATUS_ERROR_COLOR,
            font=("Helvetica", 10),
        )
        style.configure(
            "Banner.TLabel",
            background=BACKGROUND_COLOR,
            foreground=STATUS_ERROR_COLOR,
            font=("Helvetica", 11),
        )
        style.configure(
            "Status.TLabel",
            background=BACKGROUND_COLOR,
            foreground=STATUS_NEUTRAL_COLOR,
            font=("Helvetica", 11),
        )
        style.configure(
            "Profile.TLabel",
            background=BACKGROUND_COLOR,
            foreground="#FFFFFF",
            padding=4,
        )
        style.configure("Accent.TButton", font=("Helvetica", 11, "bold"))
        style.configure("TButton", padding=(16, 8))
        style.map("TButton", background=[("disabled", "#2B2B2B")])
        self.root.option_add("*Font", "Helvetica 11")

    def _build_header(self) -> None:
        frame = ttk.Frame(self.root, style="Header.TFrame", padding=(24, 12))
        frame.grid(row=0, column=0, sticky="nwe")
        frame.columnconfigure(0, weight=1)
        frame.columnconfigure(1, weight=0)
        frame.columnconfigure(2, weight=1)

        self._status_label = ttk.Label(frame, text="Not signed in", style="Status.TLabel")
        self._status_label.grid(row=0, column=0, sticky="w")

        title = ttk.Label(frame, text="Vitrine", style="HeaderTitle.TLabel")
        title.grid(row=0, column=1)

        self._avatar_label = ttk.Label(frame, style="Profile.TLabel")
        self._avatar_label.grid(row=0, column=2, sticky="e")

    def _build_main_area(self) -> None:
        main_frame = ttk.Frame(self.root, padding=(24, 8, 24, 16), style="Main.TFrame")
        main_frame.grid(row=1, column=0, sticky="nsew")
        main_frame.columnconfigure(0, weight=1)
        main_frame.rowconfigure(3, weight=1)

        self._build_auth_section(main_frame)
        self._build_banner(main_frame)
        self._build_products_section(main_frame)

    def _build_auth_section(self, parent: tk.Misc) -> None:
        frame = ttk.Frame(parent, style="Card.TFrame", padding=(20, 18))
        frame.grid(row=0, column=0, sticky="ew")
        frame.columnconfigure(1, weight=1)
        self._auth_frame = frame

        self._form_title = ttk.Label(frame, style="Section.TLabel")
        self._form_title.grid(row=0, column=0, columnspan=3, sticky="w")

        self._username_entry = ttk.Entry(frame, textvariable=self._username_var, width=28)
        self._username_entry.grid(row=1, column=0, sticky="w", pady=(12, 0), padx=(0, 12))
        self._password_entry = ttk.Entry(
            frame, textvariable=self._password_var, show="•", width=28
        )
        self._password_entry.grid(row=1, column=1, sticky="w", pady=(12, 0))
        self._password_entry.bind("<Return>", lambda _: self.submit_form())

        self._submit_button = ttk.Button(
            frame,
            command=self.submit_form,
            style="Accent.TButton",
            state=tk.DISABLED,
        )
        self._submit_button.grid(row=1, column=2, sticky="e", pady=(12, 0))

        self._hint_label = ttk.Label(
            frame,
            text="Password must contain at least 4 characters.",
            style="Hint.TLabel",
        )
        self._hint_label.grid(row=2, column=0, columnspan=3, sticky="w", pady=(8, 0))

        self._form_error_label = ttk.Label(
            frame, textvariable=self._form_error_var, style="Error.TLabel"
        )
        self._form_error_label.grid(row=3, column=0, columnspan=3, sticky="w", pady=(4, 0))

        self._session_button = ttk.Button(parent, command=self.toggle_form)
        self._session_button.grid(row=1, column=0, sticky="w", pady=(12, 0))

    def _build_banner(self, parent: tk.Misc) -> None:
        frame = ttk.Frame(parent, style="Main.TFrame")
        frame.grid(row=2, column=0, sticky="w", pady=(12, 0))
        self._banner_frame = frame

        label = ttk.Label(frame, textvariable=self._catalog_error_var, style="Banner.TLabel")
        label.pack(side=tk.LEFT, padx=(0, 12))
        retry = ttk.Button(frame, text="Retry", command=self.retry_catalog)
        retry.pack(side=tk.LEFT)

    def _build_products_section(self, parent: tk.Misc) -> None:
        frame = ttk.Frame(parent, style="Card.TFrame", padding=(20, 18))
        frame.grid(row=3, column=0, sticky="nsew", pady=(16, 0))
        frame.columnconfigure(0, weight=1)
        frame.rowconfigure(1, weight=1)

        label = ttk.Label(frame, text="Products", style="Section.TLabel")
        label.grid(row=0, column=0, sticky="w")

        list_container = ttk.Frame(frame, style="Card.TFrame")
        list_container.grid(row=1, column=0, sticky="nsew", pady=(16, 0))
        list_container.columnconfigure(0, weight=1)
        list_container.rowconfigure(0, weight=1)

        self._products_listbox = tk.Listbox(
            list_container,
            activestyle=tk.NONE,
            bg=CARD_COLOR,
            fg="#FFFFFF",
            font=("Helvetica", 11),
            highlightthickness=0,
            selectbackground=ACCENT_COLOR,
            selectforeground=LISTBOX_SELECTION_FG,
            relief=tk.FLAT,
            borderwidth=0,
            exportselection=False,
        )
        self._products_listbox.grid(row=0, column=0, sticky="nsew")
        self._products_listbox.bind("<<ListboxSelect>>", lambda _: self._update_favorite_button())

        scrollbar = ttk.Scrollbar(
            list_container,
            orient=tk.VERTICAL,
            command=self._products_listbox.yview,
        )
        scrollbar.grid(row=0, column=1, sticky="ns")
        self._products_listbox.configure(yscrollcommand=scrollbar.set)

        self._favorite_button = ttk.Button(
            frame,
            text="Add as favorite",
            command=self.toggle_selected_favorite,
            state=tk.DISABLED,
        )
        self._favorite_button.grid(row=2, column=0, sticky="e", pady=(16, 0))

    def _on_credentials_changed(self, *_: object) -> None:
        state = tk.NORMAL if self._current_credentials().is_complete else tk.DISABLED
        self._submit_button.configure(state=state)

    def _current_credentials(self) -> Credentials:
        return Credentials(username=self._username_var.get(), password=self._password_var.get())

    def _selected_product_id(self) -> object | None:
        selection = self._products_listbox.curselection()
        if not selection or selection[0] >= len(self._visible_product_ids):
            return None
        return self._visible_product_ids[selection[0]]

    def _update_avatar(self, username: str | None) -> None:
        if not username:
            self._avatar_label.configure(image="", text="🙂")
            self._avatar_label.image = None
            return

        image = Image.new("RGBA", (AVATAR_SIZE, AVATAR_SIZE), (0, 0, 0, 0))
        drawer = ImageDraw.Draw(image)
        drawer.ellipse((0, 0, AVATAR_SIZE - 1, AVATAR_SIZE - 1), fill=ACCENT_COLOR)
        drawer.text(
            (AVATAR_SIZE / 2, AVATAR_SIZE / 2),
            username[0].upper(),
            fill=LISTBOX_SELECTION_FG,
            font=ImageFont.load_default(),
            anchor="mm",
        )
        self._avatar_photo = ImageTk.PhotoImage(image)
        self._avatar_label.configure(image=self._avatar_photo, text="")
        self._avatar_label.image = self._avatar_photo

    # ----------------------------------------------------------------- Render -
    def _render(self, snapshot: StateSnapshot) -> None:
        """Met à jour l'interface à partir de l'état courant."""
        self._snapshot = snapshot

        if snapshot.is_authenticated:
            username = str(snapshot.authenticated_user.get("username") or "")
            self._status_label.configure(
                text=f"Signed in as {username}",
                foreground=STATUS_SUCCESS_COLOR,
            )
            self._auth_frame.grid_remove()
            self._session_button.configure(text=f"Logout {username}", command=self.logout)
            self._update_avatar(username)
        else:
            self._status_label.configure(text="Not signed in", foreground=STATUS_NEUTRAL_COLOR)
            self._auth_frame.grid()
            self._render_form(snapshot)
            self._update_avatar(None)

        if snapshot.catalog_error:
            self._catalog_error_var.set(snapshot.catalog_error)
            self._banner_frame.grid()
        else:
            self._banner_frame.grid_remove()

        self._render_products(snapshot)

    def _render_form(self, snapshot: StateSnapshot) -> None:
        if snapshot.presenting_login_form:
            self._form_title.configure(text="Sign in")
            self._submit_button.configure(text="Login")
            self._hint_label.grid_remove()
            self._form_error_var.set(snapshot.login_error or "")
            toggle_text = "Register new user"
        else:
            self._form_title.configure(text="Create an account")
            self._submit_button.configure(text="Register")
            self._hint_label.grid()
            self._form_error_var.set(snapshot.register_error or "")
            toggle_text = "Sign in as existing user"
        self._session_button.configure(text=toggle_text, command=self.toggle_form)
        self._on_credentials_changed()

    def _render_products(self, snapshot: StateSnapshot) -> None:
        selected = self._selected_product_id()
        self._products_listbox.delete(0, tk.END)
        self._visible_product_ids = []

        for index, product in enumerate(snapshot.products):
            product_id = product.get("id")
            name = product.get("name", "Untitled")
            is_favorite = snapshot.favorite_for(product_id) is not None
            label = f"{FAVORITE_MARK} {name}" if is_favorite else f"   {name}"
            self._products_listbox.insert(tk.END, label)
            if is_favorite:
                self._products_listbox.itemconfigure(index, foreground=ACCENT_COLOR)
            self._visible_product_ids.append(product_id)
            if product_id == selected:
                self._products_listbox.selection_set(index)

        self._update_favorite_button()

    def _update_favorite_button(self) -> None:
        product_id = self._selected_product_id()
        if not self._snapshot.is_authenticated or product_id is None:
            self._favorite_button.configure(state=tk.DISABLED, text="Add as favorite")
            return

        if self._snapshot.favorite_for(product_id) is not None:
            text = "Remove as favorite"
        else:
            text = "Add as favorite"
        self._favorite_button.configure(state=tk.NORMAL, text=text)

    # --------------------------------------------------------------- Callbacks -
    def submit_form(self) -> None:
        credentials = self._current_credentials()
        if not credentials.is_complete:
            return

        if self._snapshot.presenting_login_form:
            snapshot = self._controller.login(credentials)
        else:
            snapshot = self._controller.register(credentials)

        if snapshot.is_authenticated:
            self._username_var.set("")
            self._password_var.set("")
        self._render(snapshot)

    def toggle_form(self) -> None:
        self._render(self._controller.toggle_form())

    def logout(self) -> None:
        self._render(self._controller.logout())

    def retry_catalog(self) -> None:
        self._render(self._controller.retry_catalog())

    def toggle_selected_favorite(self) -> None:
        product_id = self._selected_product_id()
        if product_id is None:
            return
        self._render(self._controller.toggle_favorite(product_id))

    # ----------------------------------------------------------------- Public -
    def run(self) -> None:
        self._render(self._controller.start())
        self.root.mainloop()
