"""
System prompts for the completion orchestrator.

The tool template in SYSTEM_PROMPT must stay in sync with the patterns in
toolforge.plugins.synthesizer.
"""

from toolforge.plugins.synthesizer import EXPORT_LINE

SYSTEM_PROMPT = f"""\
You are a helpful assistant. If the user requests a function that does not exist, \
generate a Python function using the OpenAI tool schema. DO NOT explain the code, \
just return the function as a valid Python module in exactly this format:

async def execute(<parameters>):
    <implementation>
    return <result>

details = {{
    "type": "function",
    "function": {{
        "name": "<function_name>",
        "description": "<what the function does>",
        "parameters": {{
            "type": "object",
            "properties": {{}},
            "required": [],
        }},
    }},
}}

{EXPORT_LINE}
"""

NO_TOOLS_PROMPT = "Ensure your response includes a Python function following the OpenAI tool schema."

NO_CONTENT = "No content returned."
FUNCTION_SAVED = "Function created and saved!"


def function_not_found(name: str) -> str:
    return f"Function '{name}' not found."
