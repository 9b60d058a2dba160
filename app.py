import gradio as gr

from table_schema_converter.config import APP_SERVER_NAME, APP_SERVER_PORT
from table_schema_converter.handlers import (
    DEFAULT_OUTPUT_FORMAT,
    OUTPUT_FORMATS,
    generate_handler,
    import_schema_handler,
    live_edit_handler,
    load_canvas_handler,
    load_sample_schema,
    start_live_editor_handler,
    stop_live_editor_handler,
)
from table_schema_converter.models import HTTP_METHODS
from table_schema_converter.session import EditorSession

# --- UI Definition ---
with gr.Blocks(title="Table Schema Converter") as demo:
    gr.Markdown("# Table ⇄ Schema Converter")
    gr.Markdown(
        "Turn table layouts from a canvas dump into JSON Schema, code, SQL DDL and OpenAPI, "
        "or turn a JSON Schema back into tables."
    )

    # State
    session_state = gr.State(value=EditorSession())

    with gr.Tab("Tables → Schema"):
        with gr.Row():
            # Left Panel: Input
            with gr.Column(scale=1):
                gr.Markdown("### 1. Import")
                canvas_file = gr.File(label="Upload Canvas Dump (JSON/YAML)", file_types=[".json", ".yaml", ".yml"])
                canvas_status = gr.Textbox(label="Status", interactive=False)
                tables_found = gr.JSON(label="Tables Found")

                gr.Markdown("### 2. Options")
                output_format = gr.Dropdown(
                    label="Output Format",
                    choices=list(OUTPUT_FORMATS),
                    value=DEFAULT_OUTPUT_FORMAT,
                    interactive=True,
                )
                include_comments = gr.Checkbox(label="Include comments", value=True)
                include_examples = gr.Checkbox(label="Include examples (JSON Schema)", value=True)
                with gr.Accordion("OpenAPI", open=False):
                    api_title = gr.Textbox(label="API Title", placeholder="API Documentation")
                    api_version = gr.Textbox(label="Version", placeholder="1.0.0")
                    api_description = gr.Textbox(label="Description")
                    server_url = gr.Textbox(label="Server URL", placeholder="https://api.example.com")
                output_filename = gr.Textbox(label="Output Filename (optional)", placeholder="output")

            # Right Panel: Result
            with gr.Column(scale=1):
                gr.Markdown("### 3. Generate")
                generate_btn = gr.Button("Generate", variant="primary")
                result_code = gr.Code(label="Result", language="json", interactive=False)
                download_output = gr.File(label="Download Result")
                live_edit_btn = gr.Button("Live Edit")

        canvas_file.upload(
            fn=load_canvas_handler,
            inputs=[canvas_file, session_state],
            outputs=[session_state, tables_found, canvas_status],
        )

        generate_btn.click(
            fn=generate_handler,
            inputs=[
                session_state,
                output_format,
                include_comments,
                include_examples,
                api_title,
                api_version,
                api_description,
                server_url,
                output_filename,
            ],
            outputs=[session_state, result_code, download_output, canvas_status],
        )

    with gr.Tab("Schema → Tables"):
        with gr.Row():
            with gr.Column(scale=1):
                gr.Markdown("### 1. Schema")
                schema_input = gr.Textbox(label="JSON Schema (JSON or YAML)", lines=20)
                sample_btn = gr.Button("Use Sample Schema")
                schema_title = gr.Textbox(label="Table Title (optional)")
                with gr.Row():
                    endpoint_method = gr.Dropdown(label="Method", choices=list(HTTP_METHODS), value="GET")
                    endpoint_path = gr.Textbox(label="Endpoint Path (optional)", placeholder="/users")
                import_btn = gr.Button("Generate Tables", variant="primary")
                import_status = gr.Textbox(label="Status", interactive=False)

            with gr.Column(scale=1):
                gr.Markdown("### 2. Tables")
                canvas_download = gr.File(label="Download Canvas Dump")
                tables_preview = gr.JSON(label="Generated Tables")

        sample_btn.click(fn=load_sample_schema, inputs=[], outputs=[schema_input])

        import_btn.click(
            fn=import_schema_handler,
            inputs=[session_state, schema_input, schema_title, endpoint_method, endpoint_path],
            outputs=[session_state, tables_preview, canvas_download, import_status],
        )

    with gr.Tab("Live Editor"):
        gr.Markdown("Edit the schema; tables are regenerated on every change. Incomplete input keeps the last result.")
        live_status = gr.Textbox(label="Status", interactive=False)
        with gr.Row():
            with gr.Column(scale=1):
                live_editor = gr.Textbox(label="Schema", lines=24)
                stop_live_btn = gr.Button("Back")
            with gr.Column(scale=1):
                live_tables = gr.JSON(label="Tables")
                live_canvas = gr.JSON(label="Canvas")

        live_edit_btn.click(
            fn=start_live_editor_handler,
            inputs=[session_state, result_code, output_format],
            outputs=[session_state, live_editor, live_status],
        )

        stop_live_btn.click(
            fn=stop_live_editor_handler,
            inputs=[session_state],
            outputs=[session_state, live_status],
        )

        live_editor.change(
            fn=live_edit_handler,
            inputs=[session_state, live_editor],
            outputs=[session_state, live_tables, live_canvas],
        )

if __name__ == "__main__":
    demo.launch(server_name=APP_SERVER_NAME, server_port=APP_SERVER_PORT)
