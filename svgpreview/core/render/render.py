"""Render a SymbolMap as a self-contained HTML gallery."""

import html

from svgpreview.core.load.config import DEFAULT_TITLE
from svgpreview.core.shapes import SymbolMap, Tile
from svgpreview.core.templating import render_template_string

PROTOCOL_RELATIVE_PREFIX = "//"
SECURE_SCHEME = "https:"

TILE_TEMPLATE = """
          <div class="svg-item">
              <img src="{$src}" alt="{$name}" />
              <p class="svg-name" data-name="{$name}">{$name}</p>
          </div>
      """

DOCUMENT_TEMPLATE = """
  <!DOCTYPE html>
  <html lang="en">
  <head>
      <meta charset="UTF-8">
      <meta name="viewport" content="width=device-width, initial-scale=1.0">
      <title>{$panel.title}</title>
      <style>
          body {
              font-family: Arial, sans-serif;
              display: flex;
              flex-direction: column;
              align-items: center;
              justify-content: flex-start;
              padding: 20px;
              background-color: #f3f3f3;
          }
          .svg-container {
              display: grid;
              grid-template-columns: repeat(auto-fill, minmax(150px, 1fr));
              gap: 20px;
              width: 100%;
          }
          .svg-item {
              text-align: center;
              padding: 10px;
              background: #fff;
              border: 1px solid #ddd;
              border-radius: 8px;
              box-shadow: 0 2px 4px rgba(0, 0, 0, 0.1);
          }
          .svg-item img {
              max-width: 100%;
              max-height: 100px;
          }
          .svg-item p {
              margin: 10px 0 0;
              font-size: 14px;
              color: #333;
              cursor: pointer;
          }
      </style>
  </head>
  <body>
      <h1>{$panel.title}</h1>
      <div class="svg-container">
          {$items}
      </div>

  </body>
  </html>
  """


def normalize_src(value: str) -> str:
    """Give protocol-relative references the https scheme; pass the rest through.

    Local paths are returned unchanged and will not resolve inside the
    rendered page.
    """
    if value.startswith(PROTOCOL_RELATIVE_PREFIX):
        return SECURE_SCHEME + value
    return value


def build_tiles(symbol_map: SymbolMap) -> list[Tile]:
    return [Tile(name=name, src=normalize_src(url)) for name, url in symbol_map.items()]


def render_tile(tile: Tile) -> str:
    return render_template_string(
        TILE_TEMPLATE,
        {"name": html.escape(tile.name), "src": html.escape(tile.src)},
    )


def render_document(symbol_map: SymbolMap, title: str = DEFAULT_TITLE) -> str:
    """Render every entry of the map, in order, into one HTML document.

    Names, image references and the title are HTML-escaped, so the output
    depends only on the map and title and is identical across calls.
    """
    items = "".join(render_tile(tile) for tile in build_tiles(symbol_map))
    return render_template_string(
        DOCUMENT_TEMPLATE,
        {"panel": {"title": html.escape(title)}, "items": items},
    )
