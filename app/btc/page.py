"""HTML page shell for the dashboard."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

PAGE_TITLE = "BTC Price Chart"

# Rendering only: all state lives in RefreshController and arrives over SSE.
PAGE_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>__TITLE__</title>
<style>
  body { font-family: system-ui, sans-serif; background: #f9fafb; color: #111827; margin: 0; padding: 3rem 1rem; }
  main { max-width: 64rem; margin: 0 auto; }
  h1 { text-align: center; font-size: 1.875rem; margin-bottom: 2rem; }
  .card { background: #fff; border: 1px solid #e5e7eb; border-radius: .75rem; padding: 1.25rem; margin-bottom: 1.5rem; }
  .card h2 { font-size: 1.125rem; font-weight: 500; margin: 0 0 .5rem; }
  .price { font-size: 1.875rem; font-weight: 700; }
  .up { color: #22c55e; } .down { color: #ef4444; }
  .muted { color: #6b7280; font-size: .875rem; }
  .banner { background: #fefce8; border: 1px solid #fef08a; color: #a16207; border-radius: .5rem; padding: 1rem; margin-bottom: 1.5rem; }
  .spinner { margin: 4rem auto; width: 3rem; height: 3rem; border-radius: 50%;
             border-top: 2px solid #3b82f6; border-bottom: 2px solid #3b82f6; animation: spin 1s linear infinite; }
  @keyframes spin { to { transform: rotate(360deg); } }
  svg text { font-size: 12px; fill: #6b7280; }
</style>
</head>
<body>
<main>
  <h1>__TITLE__</h1>
  <div id="spinner" class="spinner"></div>
  <div id="dashboard" hidden>
    <div id="banner" class="banner" hidden></div>
    <p>Status: <strong id="status"></strong></p>
    <section class="card">
      <h2>Current BTC Price</h2>
      <span id="price" class="price"></span>
      <span id="change"></span>
      <p id="updated" class="muted"></p>
    </section>
    <section class="card">
      <h2>Price History</h2>
      <svg id="chart" viewBox="0 0 800 300" width="100%" height="300"></svg>
    </section>
  </div>
</main>
<script>
  const $ = (id) => document.getElementById(id);

  function drawChart(points) {
    const svg = $("chart");
    if (points.length === 0) { svg.innerHTML = ""; return; }
    const prices = points.map((p) => p.price);
    const lo = Math.min(...prices), hi = Math.max(...prices), span = (hi - lo) || 1;
    const left = 90, right = 780, top = 10, bottom = 260;
    const x = (i) => points.length === 1 ? (left + right) / 2 : left + (i * (right - left)) / (points.length - 1);
    const y = (v) => bottom - ((v - lo) / span) * (bottom - top);
    const line = points.map((p, i) => `${x(i)},${y(p.price)}`).join(" ");
    const dots = points.map((p, i) => `<circle cx="${x(i)}" cy="${y(p.price)}" r="3" fill="#3b82f6"><title>$${p.price.toLocaleString()}</title></circle>`).join("");
    const labels = points.map((p, i) => `<text x="${x(i)}" y="${bottom + 25}" text-anchor="middle">${p.formattedDate}</text>`).join("");
    svg.innerHTML =
      `<text x="${left - 10}" y="${top + 5}" text-anchor="end">$${hi.toLocaleString()}</text>` +
      `<text x="${left - 10}" y="${bottom}" text-anchor="end">$${lo.toLocaleString()}</text>` +
      `<polyline points="${line}" fill="none" stroke="#3b82f6" stroke-width="2"/>` + dots + labels;
  }

  function render(state) {
    $("spinner").hidden = !state.loading;
    $("dashboard").hidden = state.loading;
    if (state.loading) return;
    $("banner").hidden = !state.error;
    $("banner").textContent = state.error || "";
    $("status").textContent = state.card.status;
    $("price").textContent = state.card.price;
    $("change").textContent = (state.card.direction === "up" ? "\\u25B2 " : "\\u25BC ") + state.card.change;
    $("change").className = state.card.direction;
    $("updated").textContent = state.card.lastUpdated;
    drawChart(state.chart);
  }

  new EventSource("/api/stream/dashboard").onmessage = (event) => render(JSON.parse(event.data));
</script>
</body>
</html>
"""


def render_page(title: str = PAGE_TITLE) -> str:
    return PAGE_HTML.replace("__TITLE__", title)


def create_page_router() -> APIRouter:
    router = APIRouter(tags=["page"])

    @router.get("/", response_class=HTMLResponse)
    async def index() -> str:
        return render_page()

    return router
