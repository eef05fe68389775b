"""Generator Agent — turns the design prompt into a React TypeScript component.

The reply is free text; extract_code strips fences and surrounding prose
before the component is written into the dev server's source tree.
"""

from pathlib import Path

from langchain_openai import ChatOpenAI

from protoloop.state import LoopState
from protoloop.utils.extraction import extract_code
from protoloop.utils.guidance import load_guidance
from protoloop.utils.parsing import invoke_with_retry

SYSTEM_PROMPT = """\
You are a React TypeScript component generator. Create a complete, functional React \
TypeScript component based on the user's design prompt.

CRITICAL INSTRUCTIONS:
- Return ONLY the raw TypeScript React code, no markdown formatting, no code blocks, no explanations
- Do NOT wrap the code in ```jsx or ```tsx or any other formatting
- The response should start directly with "import" and end with the component export
- Use TypeScript with proper type annotations
- Use modern React with hooks
- Include Tailwind CSS classes for styling
- Make it interactive and engaging
- Export as default
- Component should be self-contained
- Use semantic HTML elements

Example of correct format:
import React, { useState } from 'react';

interface Props {
  // types here
}

const ComponentName: React.FC<Props> = () => {
  // component code
  return (
    <div>content</div>
  );
};

export default ComponentName;
"""


def component_path(config: dict) -> Path:
    """Return the path of the generated component inside the dev server project."""
    return Path(config["project_path"]) / config["component_path"]


def write_component(code: str, config: dict) -> Path:
    """Overwrite the current code artifact in place."""
    path = component_path(config)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(code, encoding="utf-8")
    return path


def generator_node(state: LoopState, config: dict) -> dict:
    """Generator node for the loop graph.

    Reads design_prompt from state, calls the configured generator model,
    extracts the component source, persists it, and returns current_code.
    With skip_generation set, the existing component file is reused instead.
    """
    if config.get("skip_generation"):
        path = component_path(config)
        print(f"[protoloop] Skipping generation, reusing {path}")
        return {"current_code": path.read_text(encoding="utf-8")}

    print("[protoloop] Generating prototype from prompt...")
    llm = ChatOpenAI(model=config["generator_model"], temperature=0.7, max_retries=0)

    system_content = SYSTEM_PROMPT
    guidance = load_guidance(config)
    if guidance:
        system_content += f"\n## UI Guidelines\n{guidance}"

    messages = [
        {"role": "system", "content": system_content},
        {"role": "user", "content": state["design_prompt"]},
    ]

    response = invoke_with_retry(llm, messages, config.get("llm_max_retries", 0))
    code = extract_code(response.content)

    path = write_component(code, config)
    print(f"[protoloop] Prototype generated and saved to {path}")
    return {"current_code": code}
