from __future__ import annotations

from flask import Flask, Response, flash, redirect, render_template_string, request, session
from markupsafe import Markup

from word_bingo.config import Settings, configure_logging, load_settings
from word_bingo.core import wizard
from word_bingo.core.errors import BingoError, InvalidWordCount
from word_bingo.core.grid import GRID_PRESETS, UI_MAX_SIZE, UI_MIN_SIZE, GridRank
from word_bingo.core.parser import parse_word_list_text, word_count_status
from word_bingo.core.pdf import export_filename, export_pdf
from word_bingo.core.printview import PRINT_CSS, render_card_preview, render_print_document, render_print_region


SESSION_KEY = "wizard"
PREVIEW_KEY = "show_preview"
EXAMPLE_WORDS = ["Coffee", "Remote Work", "Zoom Call", "Deadline", "Email", "Meeting", "Laptop", "Team Chat", "Project"]


HTML = """
<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>Bingo Builder</title>
    <style>
      body { font-family: system-ui, -apple-system, Segoe UI, Roboto, sans-serif; margin: 24px; max-width: 920px; }
      h1 { margin: 0 0 8px; }
      .hint { color: #333; margin: 0 0 16px; }
      label { display: block; font-weight: 600; margin: 12px 0 6px; }
      input[type="number"], textarea { width: 100%; padding: 10px; border: 1px solid #111; border-radius: 6px; }
      textarea { min-height: 320px; font-family: ui-monospace, SFMono-Regular, Menlo, Monaco, Consolas, monospace; }
      .row { display: grid; grid-template-columns: 1fr 1fr; gap: 12px; }
      .btn { margin-top: 14px; padding: 10px 14px; border: 2px solid #111; border-radius: 10px; background: #fff; font-weight: 700; cursor: pointer; text-decoration: none; color: #111; display: inline-block; }
      .box { border: 2px solid #111; border-radius: 12px; padding: 14px; margin-bottom: 14px; }
      .flash { margin: 10px 0; padding: 10px 12px; border: 1px solid #111; border-radius: 8px; }
      .small { font-size: 12px; color: #333; }
      .example { display: grid; grid-template-columns: repeat(3, 1fr); gap: 6px; max-width: 360px; }
      .example div { border: 2px solid #111; border-radius: 8px; padding: 8px; text-align: center; font-size: 13px; }
      .actions { display: flex; gap: 10px; flex-wrap: wrap; }
      @media screen { #print-region { display: none; } }
      {{ print_css }}
    </style>
  </head>
  <body>
    <div class="no-print">
    <h1>Bingo Builder</h1>

    {% with messages = get_flashed_messages() %}
      {% if messages %}
        {% for msg in messages %}
          <div class="flash">{{ msg }}</div>
        {% endfor %}
      {% endif %}
    {% endwith %}

    {% if step == "intro" %}
      <p class="hint">Create custom, randomized Bingo cards in seconds for learning, team building, or just pure fun!</p>
      <div class="box">
        <p>Each player receives a card filled with the same words or phrases in a different order. A host calls out items and players mark them off. The first to complete a row, column or diagonal wins.</p>
        <p class="small">Example 3×3 card:</p>
        <div class="example">{% for w in example_words %}<div>{{ w }}</div>{% endfor %}</div>
      </div>
      <form method="post" action="/start"><button class="btn" type="submit">Get Started</button></form>

    {% elif step == "grid" %}
      <p class="hint">Choose your grid size.</p>
      <form class="box" method="post" action="/grid">
        {% for preset in presets %}
          <label>
            <input type="radio" name="grid" value="{{ preset.rank.label }}" {% if state.rank == preset.rank %}checked{% endif %}>
            {{ preset.label }} &middot; {{ preset.description }} <span class="small">({{ preset.words_needed }} words needed)</span>
          </label>
        {% endfor %}
        <label><input type="radio" name="grid" value="custom" {% if state.rank and state.rank not in preset_ranks %}checked{% endif %}> Custom</label>
        <div class="row">
          <div>
            <label>Rows</label>
            <input type="number" name="rows" min="{{ min_size }}" max="{{ max_size }}" value="{{ state.rank.rows if state.rank else 3 }}">
          </div>
          <div>
            <label>Columns</label>
            <input type="number" name="cols" min="{{ min_size }}" max="{{ max_size }}" value="{{ state.rank.cols if state.rank else 3 }}">
          </div>
        </div>
        <div class="actions">
          <button class="btn" type="submit" formaction="/back">Back</button>
          <button class="btn" type="submit">Continue to Word Input</button>
        </div>
      </form>

    {% elif step == "words" %}
      <p class="hint">Enter your words or phrases, one per line.</p>
      <form class="box" method="post" action="/words">
        <p><strong>Word Count: {{ status.actual }} / {{ status.required }}</strong> <span class="small">{{ state.rank.label }} grid</span></p>
        <textarea name="words" placeholder="Enter {{ status.required }} words (one per line)">{{ state.words|join("\\n") }}</textarea>
        {% if status.actual %}<p class="small">{{ status.message }}</p>{% endif %}
        <div class="actions">
          <button class="btn" type="submit" formaction="/back">Back</button>
          <button class="btn" type="submit" name="action" value="save">Save</button>
          <button class="btn" type="submit" name="action" value="next">Generate Cards</button>
        </div>
      </form>

    {% elif step == "generate" %}
      <p class="hint">Preview your cards and download them as a PDF or print them two per page.</p>
      <form class="box" method="post" action="/generate">
        <label>How many cards would you like to create?</label>
        <input type="number" name="count" min="1" max="{{ max_cards }}" value="{{ state.count }}">
        <p class="small">Each card has the same words in a different random order.</p>
        <div class="actions">
          <button class="btn" type="submit" formaction="/back">Back to Edit Words</button>
          <button class="btn" type="submit" name="action" value="update">Update</button>
          <button class="btn" type="submit" name="action" value="regenerate">Shuffle Again</button>
        </div>
      </form>
      <div class="actions">
        <a class="btn" href="/export.pdf">Download {{ state.count }} Cards as PDF</a>
        <button class="btn" type="button" onclick="window.print()">Print Cards</button>
        <a class="btn" href="/print" target="_blank">Open Print View</a>
      </div>
      <form method="post" action="/preview">
        <button class="btn" type="submit">{% if show_preview %}Hide Preview{% else %}Show Preview{% endif %}</button>
      </form>
      {% if show_preview %}{{ preview }}{% endif %}
    {% endif %}
    </div>

    {% if print_region %}{{ print_region }}{% endif %}
  </body>
</html>
"""


def _load_state() -> wizard.WizardState:
    return wizard.state_from_dict(session.get(SESSION_KEY))


def _save_state(state: wizard.WizardState) -> None:
    session[SESSION_KEY] = wizard.state_to_dict(state)


def _parse_int(raw: str | None, what: str) -> int:
    try:
        return int((raw or "").strip())
    except ValueError:
        raise BingoError(f"{what} must be a whole number.") from None


def create_app(settings: Settings | None = None) -> Flask:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.config["WORD_BINGO"] = settings

    @app.errorhandler(BingoError)
    def handle_bingo_error(exc: BingoError) -> Response:
        flash(str(exc))
        return redirect("/")

    @app.get("/")
    def index() -> str | Response:
        state = _load_state()
        context = dict(
            step=state.name,
            state=state,
            print_css=Markup(PRINT_CSS),
            print_region=None,
            preview=None,
        )
        if isinstance(state, wizard.IntroStep):
            context["example_words"] = EXAMPLE_WORDS
        elif isinstance(state, wizard.GridStep):
            context.update(
                presets=GRID_PRESETS,
                preset_ranks=[p.rank for p in GRID_PRESETS],
                min_size=UI_MIN_SIZE,
                max_size=UI_MAX_SIZE,
            )
        elif isinstance(state, wizard.WordsStep):
            context["status"] = word_count_status(state.words, state.rank)
        elif isinstance(state, wizard.GenerateStep):
            try:
                batch = state.batch(max_count=settings.max_cards)
            except (BingoError, ValueError) as exc:
                # Stored state can outlive a change to max_cards.
                app.logger.warning("Cannot rebuild cards from session: %s", exc)
                _save_state(wizard.back(state))
                flash(str(exc))
                return redirect("/")
            context.update(
                max_cards=settings.max_cards,
                show_preview=session.get(PREVIEW_KEY, True),
                preview=render_card_preview(batch.cards[: settings.preview_count], state.rank),
                print_region=render_print_region(batch.cards, state.rank),
            )
        return render_template_string(HTML, **context)

    @app.post("/start")
    def start() -> Response:
        _save_state(wizard.start(_load_state()))
        return redirect("/")

    @app.post("/grid")
    def grid() -> Response:
        state = _load_state()
        choice = (request.form.get("grid") or "").strip()
        if not choice:
            flash("Choose a grid size first.")
            return redirect("/")

        if choice == "custom":
            rows = _parse_int(request.form.get("rows"), "Rows")
            cols = _parse_int(request.form.get("cols"), "Columns")
            if not (UI_MIN_SIZE <= rows <= UI_MAX_SIZE and UI_MIN_SIZE <= cols <= UI_MAX_SIZE):
                flash(f"Rows and columns must be between {UI_MIN_SIZE} and {UI_MAX_SIZE}.")
                return redirect("/")
            rank = GridRank(rows=rows, cols=cols)
        else:
            try:
                rank = GridRank.parse(choice)
            except ValueError as exc:
                raise BingoError(str(exc)) from exc

        state = wizard.select_rank(state, rank)
        _save_state(wizard.grid_next(state))
        return redirect("/")

    @app.post("/words")
    def words() -> Response:
        state = _load_state()
        parsed = parse_word_list_text(request.form.get("words") or "")
        state = wizard.change_words(state, parsed.words)
        _save_state(state)

        if request.form.get("action") == "next":
            try:
                _save_state(wizard.words_next(state, count=settings.default_card_count))
            except InvalidWordCount:
                flash(word_count_status(state.words, state.rank).message)
        return redirect("/")

    @app.post("/generate")
    def generate() -> Response:
        state = _load_state()
        if request.form.get("action") == "regenerate":
            state = wizard.regenerate(state)
        else:
            count = _parse_int(request.form.get("count") or str(settings.default_card_count), "Number of cards")
            state = wizard.set_count(state, count, max_count=settings.max_cards)
        _save_state(state)
        return redirect("/")

    @app.post("/back")
    def back() -> Response:
        _save_state(wizard.back(_load_state()))
        return redirect("/")

    @app.post("/reset")
    def reset() -> Response:
        session.pop(SESSION_KEY, None)
        session.pop(PREVIEW_KEY, None)
        return redirect("/")

    @app.post("/preview")
    def toggle_preview() -> Response:
        session[PREVIEW_KEY] = not session.get(PREVIEW_KEY, True)
        return redirect("/")

    @app.get("/export.pdf")
    def export() -> Response:
        state = _load_state()
        if not isinstance(state, wizard.GenerateStep):
            flash("Enter your words before exporting cards.")
            return redirect("/")

        try:
            batch = state.batch(max_count=settings.max_cards)
            pdf_bytes = export_pdf(batch.cards, state.rank)
        except (BingoError, ValueError):
            app.logger.exception("PDF export failed")
            flash("Failed to generate PDF. Please try again.")
            return redirect("/")

        flash(f"Generated {len(batch)} Bingo cards!")
        return Response(
            pdf_bytes,
            mimetype="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{export_filename(state.rank)}"'},
        )

    @app.get("/print")
    def print_view() -> Response:
        state = _load_state()
        if not isinstance(state, wizard.GenerateStep):
            flash("Enter your words before printing cards.")
            return redirect("/")

        try:
            batch = state.batch(max_count=settings.max_cards)
            html = render_print_document(batch.cards, state.rank)
        except (BingoError, ValueError):
            app.logger.exception("Print view failed")
            flash("Failed to prepare cards for printing. Please try again.")
            return redirect("/")
        return Response(html, mimetype="text/html")

    return app


app = create_app()


if __name__ == "__main__":
    app.run(host="127.0.0.1", port=5000, debug=True)
