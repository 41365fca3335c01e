import json

from readme_wtf import models

STYLE_GUIDES = {
    "professional": """\
**Professional Style**
- Formal, enterprise-friendly tone
- Comprehensive documentation with all sections
- Clear structure with proper headings
- Technical accuracy is paramount
- Include examples and code snippets
- No emojis or casual language\
""",
    "casual": """\
**Casual Style**
- Friendly, conversational tone
- Use emojis where appropriate 🚀
- Keep it fun but informative
- Use contractions and casual phrases
- Still technically accurate
- Make it welcoming for newcomers\
""",
    "minimal": """\
**Minimal Style**
- Just the essentials, no fluff
- Brief descriptions
- Quick start focus
- Bullet points over paragraphs
- Skip optional sections
- Get to the point fast\
""",
}

SYSTEM_PROMPT = """\
You are README.wtf, an AI assistant that generates high-quality README files by analyzing actual codebases.

## Your Mission
Analyze the provided repository data and generate a comprehensive, accurate README that reflects what the code actually does.

## Repository Information
- **URL**: {url}
- **Owner**: {owner}
- **Repo**: {repo}

## File Structure
```
{file_tree}
```

## Key Files
{manifest}

{key_files}

## Existing Documentation
{existing_readme}

## Style Guidelines
{style_guide}

## Rules
1. **Base everything on actual code** - Don't invent features that aren't in the codebase
2. **Be comprehensive** - Include Title, Description, Installation, Usage, Features, and any other relevant sections
3. **Add relevant badges** - Include badges for license, version, CI status if applicable
4. **Use proper markdown formatting** - Use headers, code blocks, lists, and tables appropriately
5. **Always output the full README** - Wrap the README in a ```markdown code block
6. **When asked to modify** - Output the complete updated README, not just changes
7. **Be conversational** - Before and after the README, add brief helpful comments

## Your Response
Start by briefly acknowledging what you found in the repository, then output the complete README in a markdown code block.\
"""

# dependency name -> display name, checked in this order
_DEPENDENCY_STACK = (
    ("react", "React"),
    ("next", "Next.js"),
    ("vue", "Vue"),
    ("angular", "Angular"),
    ("express", "Express"),
    ("typescript", "TypeScript"),
    ("tailwindcss", "Tailwind CSS"),
)

_EXTENSION_STACK = (
    (".rs", "Rust"),
    (".py", "Python"),
    (".go", "Go"),
)


def style_guide(style: models.ReadmeStyle) -> str:
    return STYLE_GUIDES.get(style, "")


def _format_manifest(manifest: dict | None) -> str:
    if manifest is None:
        return "No package.json found"
    return f"### package.json\n```json\n{json.dumps(manifest, indent=2)}\n```"


def _format_key_files(key_files: tuple[models.FileContent, ...]) -> str:
    return "\n\n".join(f"### {f.path}\n```\n{f.content}\n```" for f in key_files)


def _format_readme(readme: str | None) -> str:
    if not readme:
        return "No existing README found"
    return f"### Existing README.md\n```markdown\n{readme}\n```"


def build_system_prompt(
    ctx: models.RepoContext,
    style: models.ReadmeStyle,
    tree_limit: int = 100,
) -> str:
    return SYSTEM_PROMPT.format(
        url=ctx.url,
        owner=ctx.owner,
        repo=ctx.repo,
        file_tree="\n".join(ctx.file_tree[:tree_limit]),
        manifest=_format_manifest(ctx.package_manifest),
        key_files=_format_key_files(ctx.key_files),
        existing_readme=_format_readme(ctx.existing_readme),
        style_guide=style_guide(style),
    )


def detect_tech_stack(ctx: models.RepoContext) -> list[str]:
    stack = []
    if ctx.package_manifest:
        deps = {}
        for key in ("dependencies", "devDependencies"):
            section = ctx.package_manifest.get(key)
            if isinstance(section, dict):
                deps.update(section)
        stack.extend(name for dep, name in _DEPENDENCY_STACK if deps.get(dep))

    for ext, name in _EXTENSION_STACK:
        if any(path.endswith(ext) for path in ctx.file_tree):
            stack.append(name)
    return stack


def build_initial_message(ctx: models.RepoContext) -> str:
    stack = detect_tech_stack(ctx)
    stack_text = f"Built with: **{', '.join(stack)}**" if stack else "Analyzing the tech stack..."
    return (
        f"I've analyzed the **{ctx.repo}** repository! 🔍\n\n"
        f"📁 Found **{len(ctx.file_tree)}** files in the codebase\n"
        f"{stack_text}\n\n"
        "Generating your README now..."
    )
