import logging
from functools import partial

import gradio as gr

from descriptor_docs.handlers import (
    load_docs_handler,
    nav_select_handler,
    navigate_handler,
    search_handler,
)
from descriptor_docs.logging_utils import configure_logging
from descriptor_docs.routing import DEFAULT_ROUTE, NAV_LINKS
from descriptor_docs.settings import DocsSettings

DOCS_CSS = """
.docs .card { border: 1px solid var(--border-color-primary); border-radius: 8px; padding: 12px; margin-bottom: 12px; }
.docs .muted { opacity: 0.7; }
.docs .chip { display: inline-block; border: 1px solid var(--border-color-primary); border-radius: 999px; padding: 2px 8px; margin: 2px; }
.docs .table { width: 100%; border-collapse: collapse; }
.docs .table th, .docs .table td { text-align: left; vertical-align: top; padding: 4px 8px; }
.docs pre.json { max-height: 480px; overflow: auto; }
.docs .sev-critical { color: #ff6b6b; }
.docs .sev-high { color: #ff9f43; }
.docs .sev-medium { color: #feca57; }
.docs .sev-low { color: #48dbfb; }
"""

# Links inside rendered views change location.hash; mirror it into the route box.
HASH_ROUTING_HEAD = """
<script>
window.addEventListener("hashchange", () => {
  const box = document.querySelector("#route-input textarea, #route-input input");
  if (!box) return;
  box.value = window.location.hash || "#overview";
  box.dispatchEvent(new Event("input", { bubbles: true }));
});
</script>
"""

# Runs in the browser before the load handler; a page opened at a deep link
# (e.g. .../#ruleset/cis.okta.v1) is rendered at that route.
INITIAL_ROUTE_JS = "(route, query) => [window.location.hash || route, query]"


def build_demo(settings: DocsSettings = DocsSettings()) -> gr.Blocks:
    with gr.Blocks(title=settings.title, css=DOCS_CSS, head=HASH_ROUTING_HEAD) as demo:
        gr.Markdown(f"# {settings.title}")
        gr.Markdown("Browse the compiled descriptor and the metaschemas for each object kind.")

        # State
        docs_state = gr.State()

        with gr.Row():
            with gr.Column(scale=1):
                version_label = gr.Textbox(label="Version", interactive=False)
                nav = gr.Radio(choices=NAV_LINKS, value=DEFAULT_ROUTE, label="Navigate")
            with gr.Column(scale=3):
                with gr.Row():
                    route_input = gr.Textbox(label="Route", value=DEFAULT_ROUTE, elem_id="route-input")
                    search_input = gr.Textbox(label="Search", placeholder="Filter the current view")
                status_msg = gr.Textbox(label="Status", value="Loading…", interactive=False)
                content = gr.HTML()

        demo.load(
            fn=partial(load_docs_handler, settings),
            inputs=[route_input, search_input],
            outputs=[docs_state, status_msg, version_label, content, nav, route_input],
            js=INITIAL_ROUTE_JS,
        )

        route_input.change(
            fn=navigate_handler,
            inputs=[docs_state, route_input],
            outputs=[content, nav],
        )

        nav.input(
            fn=nav_select_handler,
            inputs=[nav],
            outputs=[route_input],
        )

        search_input.change(
            fn=search_handler,
            inputs=[docs_state, search_input, route_input],
            outputs=[docs_state, content],
        )

    return demo


demo = build_demo()

if __name__ == "__main__":
    configure_logging(logging.INFO)
    demo.launch()
