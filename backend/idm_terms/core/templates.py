"""
Template rendering utilities for client-side scripts
"""
from jinja2 import Environment, PackageLoader, StrictUndefined

# Scripts are JavaScript, not HTML: no autoescaping
jinja_env = Environment(
    loader=PackageLoader("idm_terms", "resources/templates"),
    autoescape=False,
    undefined=StrictUndefined,
    keep_trailing_newline=True,
)


def render_template(template_name: str, context: dict) -> str:
    """Render template with context"""
    return jinja_env.get_template(template_name).render(**context)


def create_client_side_script_executor_function(
    script: str,
    terms: str,
    output_parameter_id: str
) -> str:
    """
    Wrap a script so the client runs it and then submits the login form once

    The wrapper guards submission with a one-shot flag, runs ``script`` and
    schedules the submit with a zero delay. ``script`` may set ``submitted``
    to keep the form open for the user.

    Args:
        script: Script body to run on the client
        terms: Terms text; it reaches the client through a text output
            callback, so the wrapper does not embed it
        output_parameter_id: Name of the form element handed to the script as ``output``

    Returns:
        Script text for a ScriptTextOutputCallback
    """
    return render_template(
        "script_executor.js.j2",
        {"script": script, "output_parameter_id": output_parameter_id},
    )


def render_terms_display_script(
    title_id: str = "callback_1",
    message_id: str = "callback_2",
    terms_id: str = "callback_3",
    terms_height: str = "150px"
) -> str:
    """Script that styles the title, purpose and terms lines of the prompt"""
    return render_template(
        "terms_display.js.j2",
        {
            "title_id": title_id,
            "message_id": message_id,
            "terms_id": terms_id,
            "terms_height": terms_height,
        },
    )
