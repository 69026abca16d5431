"""
Visualization Page

A single self-contained HTML page for browsing every rendered diagram.

Key Features:
- Sidebar navigation across the overview diagrams and every chain.
- Client-side rendering through the Mermaid browser library.
- Name filter across all diagrams.
- Element counts from the embedded analysis data.
- Raw diagram source toggle for copy/paste into other Mermaid tools.
"""

import html
import json
import re
import webbrowser
from pathlib import Path
from typing import Any, Dict, Sequence

from ..config import DEFAULT_HTML_OUTPUT, DEFAULT_TITLE, DIAGRAM_KINDS, MAX_CLASS_METHODS
from ..core.analysis import AnalysisResult
from ..render.chain_diagrams import (
    render_chain_flowcharts,
    render_command_chain_flowcharts,
    render_multi_chain_flowchart,
)
from ..render.class_diagram import render_class_diagram
from ..render.flowchart import (
    render_architecture_flowchart,
    render_command_flowchart,
    render_event_flowchart,
)

MERMAID_CDN = "https://unpkg.com/mermaid@10.6.1/dist/mermaid.min.js"

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>__TITLE__</title>
    <script src="__MERMAID_CDN__"></script>
    <style>
        :root {
            --bg-base: #fafafa;
            --bg-sidebar: #1f2937;
            --text-sidebar: #e5e7eb;
            --accent: #3b82f6;
            --border: #e5e7eb;
        }
        * { box-sizing: border-box; }
        body {
            margin: 0;
            display: flex;
            height: 100vh;
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
            background: var(--bg-base);
        }
        nav {
            width: 300px;
            overflow-y: auto;
            background: var(--bg-sidebar);
            color: var(--text-sidebar);
            padding: 16px 0;
        }
        nav h1 { font-size: 16px; padding: 0 16px; margin: 0 0 8px; }
        #summary { font-size: 11px; opacity: 0.7; padding: 0 16px; margin: 0 0 12px; }
        nav h2 {
            font-size: 11px;
            text-transform: uppercase;
            letter-spacing: 0.08em;
            opacity: 0.6;
            padding: 12px 16px 4px;
            margin: 0;
        }
        nav input {
            margin: 0 16px 8px;
            width: calc(100% - 32px);
            padding: 6px 8px;
            border-radius: 4px;
            border: none;
        }
        nav a {
            display: block;
            padding: 6px 16px;
            color: inherit;
            text-decoration: none;
            font-size: 13px;
            white-space: nowrap;
            overflow: hidden;
            text-overflow: ellipsis;
        }
        nav a:hover { background: rgba(255, 255, 255, 0.06); }
        nav a.active { background: var(--accent); color: #fff; }
        main { flex: 1; overflow: auto; padding: 24px; }
        header { display: flex; align-items: center; gap: 12px; border-bottom: 1px solid var(--border); }
        header h2 { flex: 1; margin: 0 0 12px; font-size: 18px; }
        header button { margin-bottom: 12px; }
        #diagram { padding-top: 16px; }
        #source { display: none; white-space: pre; background: #111827; color: #f9fafb; padding: 16px; }
        .empty { color: #6b7280; font-style: italic; }
    </style>
</head>
<body>
    <nav>
        <h1>__TITLE__</h1>
        <p id="summary"></p>
        <input id="search" type="search" placeholder="Filter diagrams...">
        <div id="menu"></div>
    </nav>
    <main>
        <header>
            <h2 id="diagram-title"></h2>
            <button id="toggle-source">Source</button>
        </header>
        <div id="diagram"></div>
        <pre id="source"></pre>
    </main>
    <script>
        const analysisData = __ANALYSIS_DATA__;
        const diagrams = __DIAGRAM_DATA__;

        mermaid.initialize({ startOnLoad: false, securityLevel: "loose", flowchart: { useMaxWidth: false } });

        const sections = [
            { title: "Overview", items: diagrams.overview },
            { title: "Chains", items: diagrams.chains },
            { title: "Command Chains", items: diagrams.commandChains },
        ];

        let renderCount = 0;

        async function show(item, link) {
            document.querySelectorAll("nav a").forEach(a => a.classList.remove("active"));
            if (link) link.classList.add("active");
            document.getElementById("diagram-title").textContent = item.name;
            document.getElementById("source").textContent = item.diagram;
            const target = document.getElementById("diagram");
            try {
                const { svg } = await mermaid.render("mermaid-" + (++renderCount), item.diagram);
                target.innerHTML = svg;
            } catch (err) {
                target.innerHTML = "";
                const p = document.createElement("p");
                p.className = "empty";
                p.textContent = "Failed to render diagram: " + err;
                target.appendChild(p);
            }
        }

        function buildMenu(filter) {
            const menu = document.getElementById("menu");
            menu.innerHTML = "";
            const needle = (filter || "").toLowerCase();
            for (const section of sections) {
                const items = section.items.filter(i => i.name.toLowerCase().includes(needle));
                if (!items.length) continue;
                const h = document.createElement("h2");
                h.textContent = section.title + " (" + items.length + ")";
                menu.appendChild(h);
                for (const item of items) {
                    const a = document.createElement("a");
                    a.href = "#";
                    a.textContent = item.name;
                    a.title = item.name;
                    a.addEventListener("click", e => { e.preventDefault(); show(item, a); });
                    menu.appendChild(a);
                }
            }
        }

        document.getElementById("search").addEventListener("input", e => buildMenu(e.target.value));
        document.getElementById("toggle-source").addEventListener("click", () => {
            const src = document.getElementById("source");
            src.style.display = src.style.display === "block" ? "none" : "block";
        });

        document.getElementById("summary").textContent = [
            ["controllers", "Controllers"], ["commands", "Commands"], ["entities", "Entities"],
            ["domainEvents", "Domain events"], ["relationships", "Relationships"],
        ].map(([key, label]) => label + ": " + analysisData[key].length).join(" / ");

        buildMenu("");
        if (diagrams.overview.length) {
            show(diagrams.overview[0], document.querySelector("nav a"));
        }
    </script>
</body>
</html>
"""


_PLACEHOLDER = re.compile(r"__(TITLE|MERMAID_CDN|ANALYSIS_DATA|DIAGRAM_DATA)__")

# Overview entries in page order, keyed by their configurable diagram kind
OVERVIEW_DIAGRAMS = (
    ("architecture", "Architecture"),
    ("command", "Commands"),
    ("event", "Events"),
    ("class", "Classes"),
    ("multi-chain", "All Chains"),
)


def _to_json(data: Any) -> str:
    """JSON safe to inline inside a <script> element."""
    return json.dumps(data, ensure_ascii=False).replace("</", "<\\/")


def build_diagrams(
    analysis: AnalysisResult,
    max_class_methods: int = MAX_CLASS_METHODS,
    diagrams: Sequence[str] = DIAGRAM_KINDS,
) -> Dict[str, Any]:
    """
    Render every diagram kind into the structure consumed by the page.

    ``diagrams`` selects which overview diagrams are included; the per-chain
    sections are always present.
    """
    renderers = {
        "architecture": render_architecture_flowchart,
        "command": render_command_flowchart,
        "event": render_event_flowchart,
        "class": lambda a: render_class_diagram(a, max_class_methods),
        "multi-chain": render_multi_chain_flowchart,
    }
    overview = [
        {"name": name, "diagram": renderers[kind](analysis)}
        for kind, name in OVERVIEW_DIAGRAMS
        if kind in diagrams
    ]
    return {
        "overview": overview,
        "chains": [c._asdict() for c in render_chain_flowcharts(analysis)],
        "commandChains": [c._asdict() for c in render_command_chain_flowcharts(analysis)],
    }


def generate_html(
    analysis: AnalysisResult,
    title: str = DEFAULT_TITLE,
    max_class_methods: int = MAX_CLASS_METHODS,
    diagrams: Sequence[str] = DIAGRAM_KINDS,
) -> str:
    """
    Generate the HTML content for the diagram browser.

    Placeholders are filled in a single pass so substituted content is never
    scanned again.
    """
    values = {
        "TITLE": html.escape(title),
        "MERMAID_CDN": MERMAID_CDN,
        "ANALYSIS_DATA": _to_json(analysis.model_dump(by_alias=True)),
        "DIAGRAM_DATA": _to_json(build_diagrams(analysis, max_class_methods, diagrams)),
    }
    return _PLACEHOLDER.sub(lambda m: values[m.group(1)], HTML_TEMPLATE)


def open_visualization(
    analysis: AnalysisResult,
    output_path: str = DEFAULT_HTML_OUTPUT,
    title: str = DEFAULT_TITLE,
    max_class_methods: int = MAX_CLASS_METHODS,
    open_browser: bool = True,
    diagrams: Sequence[str] = DIAGRAM_KINDS,
) -> str:
    """
    Write the page to ``output_path`` and optionally open it in the browser.
    """
    out_file = Path(output_path)
    out_file.write_text(generate_html(analysis, title, max_class_methods, diagrams), encoding="utf-8")

    if open_browser:
        webbrowser.open(out_file.resolve().as_uri())

    return str(out_file)
