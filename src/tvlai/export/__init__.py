"""tvlai export: text listings of instructions and abstract state.

Public API::

    from tvlai.export import format_block, format_state
    print(format_block(block))
    print(format_state(ctx.state, arch))
"""

from .listing import (
    format_block,
    format_blocks,
    format_instruction,
    format_operand,
    format_state,
)

__all__ = [
    "format_block",
    "format_blocks",
    "format_instruction",
    "format_operand",
    "format_state",
]
