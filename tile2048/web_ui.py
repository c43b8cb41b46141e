from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from .config import GameConfig
from .controller import GameController, ScoreNotSubmittableError
from .leaderboard import InvalidPlayerNameError

HTML_PAGE = """<!DOCTYPE html>
<html>
<head>
    <meta name="viewport" content="width=device-width, initial-scale=1.0, user-scalable=no">
    <title>2048</title>
    <style>
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body { font-family: Arial, sans-serif; background: #faf8ef; display: flex; justify-content: center; align-items: center; min-height: 100vh; touch-action: none; }
        .container { text-align: center; }
        h1 { color: #776e65; font-size: 48px; margin-bottom: 10px; }
        .score { color: #776e65; font-size: 24px; margin-bottom: 20px; }
        .board { position: relative; width: 370px; height: 370px; background: #bbada0; padding: 10px; border-radius: 6px; margin: 0 auto; }
        .cell { position: absolute; width: 80px; height: 80px; background: #cdc1b4; border-radius: 4px; }
        .tile { position: absolute; width: 80px; height: 80px; display: flex; justify-content: center; align-items: center; font-size: 28px; font-weight: bold; border-radius: 4px; transition: left 0.1s, top 0.1s; }
        .tile.new { animation: appear 0.2s; }
        .tile.merge { animation: pop 0.2s; }
        @keyframes appear { from { transform: scale(0); } to { transform: scale(1); } }
        @keyframes pop { 50% { transform: scale(1.15); } }
        .t2 { background: #eee4da; color: #776e65; }
        .t4 { background: #ede0c8; color: #776e65; }
        .t8 { background: #f2b179; color: #f9f6f2; }
        .t16 { background: #f59563; color: #f9f6f2; }
        .t32 { background: #f67c5f; color: #f9f6f2; }
        .t64 { background: #f65e3b; color: #f9f6f2; }
        .t128 { background: #edcf72; color: #f9f6f2; }
        .t256 { background: #edcc61; color: #f9f6f2; }
        .t512 { background: #edc850; color: #f9f6f2; }
        .t1024 { background: #edc53f; color: #f9f6f2; font-size: 22px; }
        .t2048 { background: #edc22e; color: #f9f6f2; font-size: 22px; }
        .tbig { background: #3c3a32; color: #f9f6f2; font-size: 18px; }
        .game-over { color: #776e65; font-size: 32px; margin-top: 20px; }
        .controls button { margin: 4px; padding: 10px 18px; }
        button { margin-top: 20px; padding: 15px 30px; font-size: 18px; cursor: pointer; background: #8f7a66; color: white; border: none; border-radius: 4px; }
        button:disabled { opacity: 0.5; cursor: default; }
        input { padding: 10px; font-size: 18px; border: 2px solid rgba(0,0,0,.12); border-radius: 4px; }
        input.invalid { border-color: rgba(217,123,69,.9); }
        table { margin: 20px auto; color: #776e65; border-collapse: collapse; }
        td, th { padding: 4px 10px; }
    </style>
</head>
<body>
    <div class="container">
        <h1>2048</h1>
        <div class="score">Score: <span id="score">0</span> &nbsp; Best: <span id="best">0</span></div>
        <div class="board" id="board"></div>
        <div class="game-over" id="gameover" style="display:none;">
            Game Over!
            <form id="submitForm" onsubmit="submitScore(event)">
                <input id="playerName" placeholder="Name" maxlength="32">
                <button type="submit">Save</button>
            </form>
            <div id="saved" style="display:none;">Score saved</div>
        </div>
        <div class="controls">
            <button data-dir="up">&uarr;</button>
            <button data-dir="left">&larr;</button>
            <button data-dir="down">&darr;</button>
            <button data-dir="right">&rarr;</button>
        </div>
        <button id="undoBtn" onclick="post('/undo')">Undo</button>
        <button onclick="post('/new')">New Game</button>
        <button onclick="toggleLeaders()">Leaders</button>
        <div id="leaders" style="display:none;">
            <table><thead><tr><th>#</th><th>Name</th><th>Score</th><th>Date</th></tr></thead><tbody id="leadersBody"></tbody></table>
            <button onclick="clearLeaders()">Clear</button>
        </div>
    </div>
    <script>
        const STEP = 90;
        let touchStart = null;
        let gameOver = false;
        async function post(url, body) {
            const res = await fetch(url, { method: 'POST', headers: {'Content-Type': 'application/json'}, body: JSON.stringify(body || {}) });
            if (res.ok) render(await res.json());
            return res;
        }
        function move(direction) { if (!gameOver) post('/move', { direction }); }
        async function load() {
            const res = await fetch('/state');
            render(await res.json());
        }
        function render(data) {
            gameOver = data.game_over;
            document.getElementById('score').textContent = data.score;
            document.getElementById('best').textContent = data.best;
            document.getElementById('undoBtn').disabled = !data.can_undo;
            document.getElementById('gameover').style.display = data.game_over ? 'block' : 'none';
            document.getElementById('submitForm').style.display = data.score_saved ? 'none' : 'block';
            document.getElementById('saved').style.display = data.score_saved ? 'block' : 'none';
            const board = document.getElementById('board');
            const alive = new Set(data.tiles.map(t => String(t.id)));
            board.querySelectorAll('.tile').forEach(el => { if (!alive.has(el.dataset.id)) el.remove(); });
            if (!board.querySelector('.cell')) {
                for (let i = 0; i < 16; i++) {
                    const cell = document.createElement('div');
                    cell.className = 'cell';
                    cell.style.left = (10 + (i % 4) * STEP) + 'px';
                    cell.style.top = (10 + Math.floor(i / 4) * STEP) + 'px';
                    board.appendChild(cell);
                }
            }
            data.tiles.forEach(t => {
                let el = board.querySelector(`.tile[data-id="${t.id}"]`);
                if (!el) {
                    el = document.createElement('div');
                    el.dataset.id = t.id;
                    board.appendChild(el);
                }
                el.className = 'tile ' + (t.value > 2048 ? 'tbig' : 't' + t.value);
                if (data.new_ids.includes(t.id)) el.classList.add('new');
                if (data.merged_ids.includes(t.id)) el.classList.add('merge');
                el.textContent = t.value;
                el.style.left = (10 + t.col * STEP) + 'px';
                el.style.top = (10 + t.row * STEP) + 'px';
            });
        }
        async function submitScore(e) {
            e.preventDefault();
            const input = document.getElementById('playerName');
            const name = input.value.trim();
            if (!name) {
                input.classList.add('invalid');
                input.focus();
                setTimeout(() => input.classList.remove('invalid'), 600);
                return;
            }
            const res = await post('/leaders', { name });
            if (res.ok) loadLeaders();
        }
        async function loadLeaders() {
            const res = await fetch('/leaders');
            const rows = await res.json();
            const body = document.getElementById('leadersBody');
            body.innerHTML = '';
            if (rows.length === 0) {
                body.innerHTML = '<tr><td colspan="4">No records yet</td></tr>';
                return;
            }
            rows.forEach((row, i) => {
                const tr = document.createElement('tr');
                [i + 1, row.name, row.score, row.date].forEach(v => {
                    const td = document.createElement('td');
                    td.textContent = v;
                    tr.appendChild(td);
                });
                body.appendChild(tr);
            });
        }
        function toggleLeaders() {
            const el = document.getElementById('leaders');
            el.style.display = el.style.display === 'none' ? 'block' : 'none';
            if (el.style.display === 'block') loadLeaders();
        }
        async function clearLeaders() {
            await fetch('/leaders', { method: 'DELETE' });
            loadLeaders();
        }
        document.addEventListener('keydown', e => {
            if (e.target.tagName === 'INPUT') return;
            const map = { ArrowUp: 'up', ArrowDown: 'down', ArrowLeft: 'left', ArrowRight: 'right', w: 'up', s: 'down', a: 'left', d: 'right' };
            if (map[e.key] !== undefined) { e.preventDefault(); move(map[e.key]); }
        });
        document.querySelectorAll('[data-dir]').forEach(btn => btn.addEventListener('click', () => move(btn.dataset.dir)));
        const boardEl = document.getElementById('board');
        boardEl.addEventListener('touchstart', e => { touchStart = { x: e.changedTouches[0].clientX, y: e.changedTouches[0].clientY }; }, { passive: true });
        boardEl.addEventListener('touchend', e => {
            if (!touchStart) return;
            const dx = e.changedTouches[0].clientX - touchStart.x;
            const dy = e.changedTouches[0].clientY - touchStart.y;
            touchStart = null;
            if (Math.max(Math.abs(dx), Math.abs(dy)) < 24) return;
            if (Math.abs(dx) > Math.abs(dy)) move(dx > 0 ? 'right' : 'left');
            else move(dy > 0 ? 'down' : 'up');
        }, { passive: true });
        load();
    </script>
</body>
</html>"""


class MoveRequest(BaseModel):
    direction: str = ""


class SubmitRequest(BaseModel):
    name: str = ""


def create_app(controller: GameController | None = None) -> FastAPI:
    """웹 UI 앱 생성"""
    app = FastAPI()
    game = controller if controller is not None else GameController(GameConfig())

    @app.get("/", response_class=HTMLResponse)
    def index():
        return HTML_PAGE

    @app.get("/state")
    def state():
        return game.snapshot()

    @app.post("/move")
    def move(data: MoveRequest):
        game.move(data.direction)
        return game.snapshot()

    @app.post("/undo")
    def undo():
        game.undo()
        return game.snapshot()

    @app.post("/new")
    def new_game():
        game.new_game()
        return game.snapshot()

    @app.get("/leaders")
    def leaders():
        return [entry.model_dump() for entry in game.leaders()]

    @app.post("/leaders")
    def submit(data: SubmitRequest):
        try:
            game.submit_score(data.name)
        except InvalidPlayerNameError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        except ScoreNotSubmittableError as e:
            raise HTTPException(status_code=409, detail=str(e)) from e
        return game.snapshot()

    @app.delete("/leaders")
    def clear_leaders():
        game.clear_leaders()
        return []

    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
