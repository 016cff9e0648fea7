"""Graphical game server: hexagonal board, player selection and game controls."""

from __future__ import annotations

import getopt
import math
import select
import sys
from typing import Any, TextIO

from hexthello.constants import ARRAY_BOARD_SIZE, DEFAULT_PORT, HEX_BOARD_RADIUS, Tile
from hexthello.protocol import Connection, Message, ProtocolError, accept, listen
from hexthello.session import FIRST_EXTERNAL, CellState, Session

MARGIN = 10
DEFAULT_RADIUS = 18
POLL_MS = 50
_SQRT3 = math.sqrt(3)
_USAGE = "[-p port]"

_STYLES = {
    CellState.EMPTY: ("#3a7d44", "#1f3f24", 1),
    CellState.WHITE: ("white", "#1f3f24", 1),
    CellState.BLACK: ("black", "#1f3f24", 1),
    CellState.ILLEGAL: ("#808080", "#1f3f24", 1),
    CellState.WHITE_LAST_MOVE: ("white", "red", 3),
    CellState.BLACK_LAST_MOVE: ("black", "red", 3),
    CellState.POSSIBLE_MOVE: ("#8fd18f", "#1f3f24", 1),
}


def _check_radius(radius: float) -> None:
    if radius <= 0:
        raise ValueError(f"cell radius must be positive, got {radius}")


def _on_board(row: int, col: int) -> bool:
    return (
        0 <= row < ARRAY_BOARD_SIZE
        and 0 <= col < ARRAY_BOARD_SIZE
        and HEX_BOARD_RADIUS <= row + col <= 3 * HEX_BOARD_RADIUS
    )


def cell_center(row: int, col: int, radius: float) -> tuple[float, float]:
    """Pixel centre of the hexagon drawn for array cell (row, col)."""
    _check_radius(radius)
    width = _SQRT3 * radius
    x = MARGIN + width * (col + (row - HEX_BOARD_RADIUS) / 2 + 0.5)
    y = MARGIN + radius * (1 + 1.5 * row)
    return x, y


def cell_at(x: float, y: float, radius: float) -> tuple[int, int] | None:
    """Array cell (row, col) whose hexagon contains the pixel, or None."""
    _check_radius(radius)
    width = _SQRT3 * radius
    px = x - MARGIN - width * (0.5 - HEX_BOARD_RADIUS / 2)
    py = y - MARGIN - radius
    q = (_SQRT3 / 3 * px - py / 3) / radius
    r = (2 / 3 * py) / radius
    s = -q - r

    rq, rr, rs = round(q), round(r), round(s)
    dq, dr, ds = abs(rq - q), abs(rr - r), abs(rs - s)
    if dq > dr and dq > ds:
        rq = -rr - rs
    elif dr > ds:
        rr = -rq - rs

    row, col = int(rr), int(rq)
    return (row, col) if _on_board(row, col) else None


def _hexagon(cx: float, cy: float, size: float) -> list[float]:
    points: list[float] = []
    for k in range(6):
        angle = math.pi / 6 + k * math.pi / 3
        points.extend((cx + size * math.cos(angle), cy + size * math.sin(angle)))
    return points


def _state(enabled: bool) -> str:
    return "normal" if enabled else "disabled"


class ServerWindow:
    """Window of the interactive server: board, controls and agent seating."""

    def __init__(
        self,
        port: str | int = DEFAULT_PORT,
        radius: float = DEFAULT_RADIUS,
        root: Any = None,
        out: TextIO | None = None,
    ) -> None:
        import tkinter
        from tkinter import messagebox, ttk

        _check_radius(radius)
        self._tk = tkinter
        self._ttk = ttk
        self._messagebox = messagebox
        self.radius = radius
        self._closed = True
        self._poll_id: str | None = None

        self.root = root if root is not None else tkinter.Tk()
        self.root.title("HexThello")
        self.root.resizable(False, False)
        self._build()

        self.session = Session(out=out, on_update=self.refresh, on_message=self.show_message)
        try:
            self.server_socket = listen(port)
        except OSError:
            self.root.destroy()
            raise
        self._closed = False
        self.root.protocol("WM_DELETE_WINDOW", self.quit)
        self.refresh()

    # -- construction --------------------------------------------------

    def _build(self) -> None:
        tk, ttk = self._tk, self._ttk
        r = self.radius
        width = _SQRT3 * r * ARRAY_BOARD_SIZE + 2 * MARGIN
        height = 2 * MARGIN + r * (2 + 3 * HEX_BOARD_RADIUS)
        self.canvas = tk.Canvas(
            self.root, width=width, height=height, background="#d8c8a8", highlightthickness=0
        )
        self.canvas.grid(row=0, column=0)
        self.canvas.bind("<Button-1>", self._clicked)

        side = tk.Frame(self.root)
        side.grid(row=0, column=1, sticky="n", padx=5)

        buttons = tk.Frame(side)
        buttons.pack(fill="x", pady=5)
        self.play_button = tk.Button(buttons, text="Play", command=self._play)
        self.stop_button = tk.Button(buttons, text="Stop", command=self._stop)
        self.reset_button = tk.Button(buttons, text="Reset", command=self._reset)
        quit_button = tk.Button(buttons, text="Quit", command=self.quit)
        for button in (self.play_button, self.stop_button, self.reset_button, quit_button):
            button.pack(side="left", expand=True, fill="x", padx=5)

        ttk.Separator(side, orient="horizontal").pack(fill="x", pady=5)

        names = tk.Frame(side)
        names.pack(fill="x", pady=5)
        self.white_name = tk.Label(names, text="Human")
        self.swap_button = tk.Button(names, text="Swap\n  <->", command=self._swap)
        self.black_name = tk.Label(names, text="Human")
        self.white_name.pack(side="left", expand=True, padx=5)
        self.swap_button.pack(side="left", expand=True, padx=5)
        self.black_name.pack(side="left", expand=True, padx=5)

        scores = tk.Frame(side)
        scores.pack(fill="x", pady=5)
        self.white_score = tk.Label(scores, text="W: 0")
        self.black_score = tk.Label(scores, text="B: 0")
        self.white_score.pack(side="left", padx=20)
        self.black_score.pack(side="right", padx=20)

        ttk.Separator(side, orient="horizontal").pack(fill="x", pady=5)

        selection = tk.Frame(side)
        selection.pack(fill="x", pady=5)
        self.combos: dict[Tile, Any] = {}
        self.disconnect_buttons: dict[Tile, Any] = {}
        for color, title, anchor in (
            (Tile.WHITE, "Select White:", "left"),
            (Tile.BLACK, "Select Black:", "right"),
        ):
            column = tk.Frame(selection)
            column.pack(side=anchor, padx=5)
            tk.Label(column, text=title).pack(pady=5)
            combo = ttk.Combobox(column, state="readonly", width=14)
            combo.pack(pady=5)
            combo.bind("<<ComboboxSelected>>", lambda _event, c=color: self._selected(c))
            button = tk.Button(
                column, text="Disconnect", command=lambda c=color: self._disconnect(c)
            )
            button.pack(pady=5)
            self.combos[color] = combo
            self.disconnect_buttons[color] = button

    # -- display -------------------------------------------------------

    def refresh(self) -> None:
        """Redraw the board and bring every control up to date."""
        if self._closed:
            return
        self.canvas.delete("all")
        for row, states in enumerate(self.session.cell_states()):
            for col, state in enumerate(states):
                if state is None:
                    continue
                fill, outline, width = _STYLES[state]
                cx, cy = cell_center(row, col, self.radius)
                self.canvas.create_polygon(
                    _hexagon(cx, cy, self.radius * 0.95),
                    fill=fill,
                    outline=outline,
                    width=width,
                )

        position = self.session.position
        self.white_score.config(text=f"W: {position.score[Tile.WHITE]}")
        self.black_score.config(text=f"B: {position.score[Tile.BLACK]}")

        names = self.session.roster.names()
        stopped = self.session.stopped
        for color, label in ((Tile.WHITE, self.white_name), (Tile.BLACK, self.black_name)):
            seat = self.session.seats[color]
            combo = self.combos[color]
            combo.configure(values=names, state="readonly" if stopped else "disabled")
            combo.current(seat)
            label.config(text=names[seat])
            self.disconnect_buttons[color].config(
                state=_state(stopped and seat >= FIRST_EXTERNAL)
            )

        self.play_button.config(state=_state(stopped and self.session.can_play))
        self.stop_button.config(state=_state(not stopped))
        self.reset_button.config(state=_state(stopped))
        self.swap_button.config(state=_state(stopped))

    def show_message(self, message: str) -> None:
        """Show an information dialog."""
        if self._closed:
            return
        self._messagebox.showinfo("Info", message, parent=self.root)

    # -- control handlers ----------------------------------------------

    def _play(self) -> None:
        try:
            self.session.play()
        except RuntimeError as exc:
            self.show_message(str(exc))

    def _stop(self) -> None:
        self.session.stop()

    def _reset(self) -> None:
        self.session.reset()

    def _swap(self) -> None:
        try:
            self.session.swap()
        except (ValueError, RuntimeError) as exc:
            self.show_message(str(exc))
        self.refresh()

    def _selected(self, color: Tile) -> None:
        index = self.combos[color].current()
        if index < 0 or index == self.session.seats[color]:
            return
        select_seat = (
            self.session.select_white if color == Tile.WHITE else self.session.select_black
        )
        try:
            select_seat(index)
        except (ValueError, IndexError, RuntimeError) as exc:
            self.show_message(str(exc))
        self.refresh()

    def _disconnect(self, color: Tile) -> None:
        try:
            self.session.disconnect(color)
        except ValueError as exc:
            self.show_message(str(exc))

    def _clicked(self, event: Any) -> None:
        cell = cell_at(event.x, event.y, self.radius)
        if cell is not None:
            self.session.click(*cell)

    # -- networking ----------------------------------------------------

    def _seated_connections(self) -> list[Connection]:
        return [
            self.session.roster[index].connection
            for index in set(self.session.seats.values())
            if index >= FIRST_EXTERNAL and self.session.roster[index].connection is not None
        ]

    def _new_connection(self) -> None:
        try:
            connection = accept(self.server_socket)
        except ProtocolError:
            return
        roster = self.session.roster
        if len(roster) >= roster.limit:
            print("ERROR!!! MAX PLAYERS LIMIT REACHED!!! REJECTING CONNECTION...")
            connection.close()
            return
        try:
            connection.send_message(Message.REQUEST_NAME)
            name = connection.recv_name()
        except ProtocolError:
            connection.close()
            return
        roster.add(name, connection)
        self.refresh()

    def _service(self) -> None:
        watched: list[Any] = [self.server_socket, *self._seated_connections()]
        readable, _, _ = select.select(watched, [], [], 0)
        for item in readable:
            if item is self.server_socket:
                self._new_connection()
            elif any(item is conn for conn in self._seated_connections()):
                self.session.on_socket_ready(item)

    def _poll(self) -> None:
        if self._closed:
            return
        try:
            self._service()
        finally:
            if not self._closed:
                self._poll_id = self.root.after(POLL_MS, self._poll)

    def run(self) -> None:
        """Accept agents and run the window until it is closed."""
        self._poll_id = self.root.after(POLL_MS, self._poll)
        self.root.mainloop()

    def quit(self) -> None:
        """Dismiss every agent, stop listening and close the window."""
        if self._closed:
            return
        self._closed = True
        self.session.close_all()
        if self._poll_id is not None:
            self.root.after_cancel(self._poll_id)
            self._poll_id = None
        self.server_socket.close()
        self.root.destroy()


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point of the graphical server."""
    args = sys.argv[1:] if argv is None else list(argv)
    port: str = DEFAULT_PORT
    try:
        options, _ = getopt.getopt(args, "p:h")
    except getopt.GetoptError as exc:
        if exc.opt == "p":
            print(f"Option -{exc.opt} requires an argument.")
        else:
            print(f"Unknown option -{exc.opt}")
        return 1

    for option, value in options:
        if option == "-h":
            print(_USAGE)
            return 0
        if option == "-p":
            port = value

    ServerWindow(port).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())