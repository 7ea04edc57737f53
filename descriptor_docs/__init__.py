"""Core logic for the OpenSSPM descriptor docs browser.

The Gradio UI lives in `app.py`. This package contains the pieces it wires:
- load the compiled descriptor and the metaschemas
- resolve `$ref` pointers and flatten schemas into field rows
- parse fragment routes and render each view as HTML
"""
