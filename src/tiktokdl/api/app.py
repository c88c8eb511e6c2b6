"""FastAPI application entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tiktokdl import __version__
from tiktokdl.api.routes import router
from tiktokdl.config import AppConfig

logger = logging.getLogger(__name__)

INDEX_HTML = """
<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>TikTok Downloader</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif;
        --color-ink: #161823;
        --color-cyan: #25f4ee;
        --color-pink: #fe2c55;
        --color-paper: #f8f8f8;
        background: var(--color-paper);
        color: var(--color-ink);
      }

      body {
        margin: 0;
        min-height: 100vh;
        display: flex;
        justify-content: center;
        align-items: flex-start;
      }

      main {
        width: min(640px, 100%);
        padding: 48px 24px;
        display: flex;
        flex-direction: column;
        gap: 24px;
      }

      h1 {
        margin: 0;
        font-size: 2rem;
      }

      form {
        display: flex;
        gap: 12px;
      }

      input {
        flex: 1;
        padding: 12px 16px;
        border-radius: 12px;
        border: 1px solid #d0d0d0;
        font-size: 1rem;
      }

      button {
        appearance: none;
        border: none;
        border-radius: 12px;
        padding: 12px 20px;
        font-size: 1rem;
        font-weight: 600;
        cursor: pointer;
        color: white;
        background: linear-gradient(135deg, var(--color-cyan), var(--color-pink));
      }

      button:disabled {
        opacity: 0.6;
        cursor: wait;
      }

      .status {
        min-height: 24px;
        font-weight: 600;
        color: var(--color-pink);
      }

      .result {
        display: grid;
        gap: 12px;
      }

      .result img {
        max-width: 100%;
        border-radius: 12px;
      }

      .links a {
        display: block;
        padding: 10px 14px;
        margin-bottom: 8px;
        border-radius: 10px;
        background: white;
        color: var(--color-ink);
        text-decoration: none;
        box-shadow: 0 4px 12px rgba(22, 24, 35, 0.08);
      }
    </style>
  </head>
  <body>
    <main>
      <h1>TikTok Downloader</h1>
      <p>Paste a TikTok link to get download links without watermark.</p>
      <form id="download-form">
        <input id="url" type="url" placeholder="https://vt.tiktok.com/ZSrJxqY5S/" required />
        <button id="submit" type="submit">Download</button>
      </form>
      <div class="status" id="status"></div>
      <section class="result" id="result"></section>
    </main>
    <script>
      const form = document.getElementById("download-form");
      const input = document.getElementById("url");
      const submit = document.getElementById("submit");
      const statusBox = document.getElementById("status");
      const resultBox = document.getElementById("result");

      const LABELS = {
        nowm_hd: "Video without watermark (HD)",
        nowm: "Video without watermark",
        wm: "Video with watermark",
      };

      function link(label, href) {
        const anchor = document.createElement("a");
        anchor.href = href;
        anchor.target = "_blank";
        anchor.rel = "noopener";
        anchor.textContent = label;
        return anchor;
      }

      function render(data) {
        resultBox.innerHTML = "";
        if (data.title) {
          const heading = document.createElement("h2");
          heading.textContent = data.title;
          resultBox.appendChild(heading);
        }
        if (data.cover) {
          const cover = document.createElement("img");
          cover.src = data.cover;
          cover.alt = "cover";
          resultBox.appendChild(cover);
        }
        const links = document.createElement("div");
        links.className = "links";
        for (const [key, label] of Object.entries(LABELS)) {
          if (data.videos[key]) {
            links.appendChild(link(label, data.videos[key]));
          }
        }
        if (data.mp3) {
          links.appendChild(link("Audio (MP3)", data.mp3));
        }
        for (const image of data.images) {
          links.appendChild(link(`Image ${image.index}`, image.url));
        }
        resultBox.appendChild(links);
      }

      form.addEventListener("submit", async (event) => {
        event.preventDefault();
        submit.disabled = true;
        statusBox.textContent = "Fetching...";
        resultBox.innerHTML = "";
        try {
          const response = await fetch("/api/download", {
            method: "POST",
            headers: { "Content-Type": "application/json" },
            body: JSON.stringify({ url: input.value.trim() }),
          });
          const payload = await response.json();
          statusBox.textContent = payload.message || "";
          if (payload.success) {
            render(payload.data);
          }
        } catch (error) {
          statusBox.textContent = `Request failed: ${error}`;
        } finally {
          submit.disabled = false;
        }
      });
    </script>
  </body>
</html>
"""


def _is_api_path(request: Request) -> bool:
    path = request.url.path
    return path == "/api" or path.startswith("/api/")


def create_app(config: AppConfig | None = None) -> FastAPI:
    config = config or AppConfig.load()

    app = FastAPI(
        title="TikTok Downloader",
        description="Download TikTok videos without watermark",
        version=__version__,
    )
    app.state.config = config

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        try:
            return await call_next(request)
        except Exception as exc:  # noqa: BLE001 - answered as JSON inside the CORS layer
            logger.exception("Unhandled error for %s %s", request.method, request.url.path)
            return JSONResponse(
                status_code=500,
                content={"success": False, "message": "Internal server error", "error": str(exc)},
            )

    # CORS is the outermost layer so the 500 responses above carry its headers.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and not _is_api_path(request):
            return HTMLResponse(INDEX_HTML, status_code=404)

        if exc.status_code == 404:
            message = "API endpoint not found"
        elif exc.status_code == 405:
            allowed = (exc.headers or {}).get("Allow", "POST")
            message = f"Method not allowed. Use {allowed}."
        else:
            message = str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": message},
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning("Rejected malformed request body for %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Request body must be JSON like {\"url\": \"...\"}"},
        )

    app.include_router(router, prefix="/api")

    @app.get("/", response_class=HTMLResponse)
    async def index() -> str:
        return INDEX_HTML

    return app


app = create_app()
