"""The plugin wiring table and its init/config callbacks."""

from __future__ import annotations

from editor_profile.actions import (
    EditorAction,
    ExCommand,
    OpenPicker,
    Picker,
    RunCurrentFile,
    ToggleTerminal,
)
from editor_profile.keymaps import Binding, KeySequence
from editor_profile.wiring import PluginContext, PluginSpec, UserCommand, apply_colorscheme

from .lsp import setup_language_servers

TERMINAL_DIRECTION = "float"
TERMINAL_SIZE = 30


def _bind(
    ctx: PluginContext,
    binding_id: str,
    keys: str,
    action: EditorAction,
    description: str,
    *,
    mode: str = "normal",
) -> Binding:
    binding = Binding(
        id=binding_id,
        mode=mode,
        sequence=KeySequence.parse(
            keys, leader=ctx.settings.leader, local_leader=ctx.settings.local_leader
        ),
        action=action,
        description=description,
        source=ctx.spec.id,
    )
    return ctx.host.set_keymap(binding)


def configure_lsp(ctx: PluginContext) -> None:
    host = ctx.host
    host.setup_plugin(
        "cmp",
        {
            "snippet": {"expand": "luasnip.lsp_expand"},
            "window": {"completion": "bordered", "documentation": "bordered"},
            "mapping": {
                "<C-b>": ("scroll_docs", -4),
                "<C-f>": ("scroll_docs", 4),
                "<C-Space>": ("complete",),
                "<C-e>": ("abort",),
                "<CR>": ("confirm", {"select": True}),
            },
            "sources": [
                [{"name": "nvim_lsp"}, {"name": "luasnip"}],
                [{"name": "buffer"}],
            ],
        },
    )
    host.setup_plugin("mason", {"ensure_installed": list(ctx.settings.lsp.ensure_installed)})
    host.setup_plugin("mason-lspconfig", {"ensure_installed": []})
    setup_language_servers(host, ctx.settings)


def configure_treesitter(ctx: PluginContext) -> None:
    ctx.host.setup_plugin(
        "nvim-treesitter.configs",
        {
            "ensure_installed": ["python", "lua", "vim"],
            "highlight": {"enable": True},
            "indent": {"enable": True},
        },
    )


PICKER_KEYS = (
    ("<leader>ff", Picker.FIND_FILES, "Find Files"),
    ("<leader>fg", Picker.LIVE_GREP, "Live Grep (search content)"),
    ("<leader>fb", Picker.BUFFERS, "Find Buffers"),
    ("<leader>fh", Picker.HELP_TAGS, "Help Tags"),
    ("<leader>fd", Picker.DIAGNOSTICS, "Show Diagnostics"),
)


def configure_telescope(ctx: PluginContext) -> None:
    for keys, picker, description in PICKER_KEYS:
        _bind(ctx, f"telescope.{picker.value}", keys, OpenPicker(picker), description)


def configure_file_tree(ctx: PluginContext) -> None:
    ctx.host.setup_plugin(
        "nvim-tree",
        {
            "sort_by": "name",
            "view": {"width": 30, "relativenumber": True},
            "renderer": {"group_empty": True},
            "filters": {"dotfiles": False},
        },
    )
    _bind(ctx, "tree.toggle", "<leader>e", ExCommand("NvimTreeToggle"), "Toggle NvimTree")


def configure_statusline(ctx: PluginContext) -> None:
    ctx.host.setup_plugin(
        "lualine",
        {
            "options": {
                "icons_enabled": True,
                "theme": "auto",
                "component_separators": {"left": "", "right": ""},
                "section_separators": {"left": "", "right": ""},
                "disabled_filetypes": {"statusline": [], "winbar": []},
                "ignore_focus": [],
                "always_last_line": True,
                "globalstatus": True,
            },
            "sections": {
                "lualine_a": ["mode"],
                "lualine_b": ["branch", "diff", "diagnostics"],
                "lualine_c": ["filename"],
                "lualine_x": ["encoding", "fileformat", "filetype"],
                "lualine_y": ["progress"],
                "lualine_z": ["location"],
            },
            "inactive_sections": {
                "lualine_a": [],
                "lualine_b": [],
                "lualine_c": ["filename"],
                "lualine_x": ["location"],
                "lualine_y": [],
                "lualine_z": [],
            },
            "tabline": {},
            "extensions": [],
        },
    )


def configure_terminal(ctx: PluginContext) -> None:
    host = ctx.host
    host.setup_plugin(
        "toggleterm",
        {
            "size": 20,
            "open_mapping": "<C-t>",
            "hide_numbers": True,
            "direction": TERMINAL_DIRECTION,
            "terminal_mappings": True,
        },
    )
    _bind(
        ctx,
        "terminal.python",
        "<leader>py",
        ToggleTerminal(TERMINAL_DIRECTION, TERMINAL_SIZE),
        "Python Terminal",
    )
    host.create_user_command(
        UserCommand(
            "PythonRun",
            RunCurrentFile(
                interpreter=ctx.settings.tools.interpreter,
                direction=TERMINAL_DIRECTION,
                size=TERMINAL_SIZE,
            ),
            description="Run Current Python File",
        )
    )
    _bind(ctx, "terminal.run", "<leader>pr", ExCommand("PythonRun"), "Run Current Python File")


def init_vimtex(ctx: PluginContext) -> None:
    host = ctx.host
    host.set_global("vimtex_mappings_enabled", 1)
    host.set_global("vimtex_view_skim_sync", 1)
    host.set_global("vimtex_view_skim_activate", 1)
    host.set_global("tex_flavor", "latex")
    host.set_global("vimtex_view_method", ctx.settings.tools.pdf_viewer)
    host.set_global("vimtex_quickfix_mode", 0)
    host.set_global("vimtex_compiler_method", "latexmk")


def configure_colorscheme(ctx: PluginContext) -> None:
    apply_colorscheme(
        ctx.host,
        ctx.settings.colorscheme,
        fallback=ctx.settings.fallback_colorscheme,
    )


PLUGIN_TABLE: tuple[PluginSpec, ...] = (
    PluginSpec(
        "neovim/nvim-lspconfig",
        dependencies=(
            "williamboman/mason.nvim",
            "williamboman/mason-lspconfig.nvim",
            "hrsh7th/cmp-nvim-lsp",
            "hrsh7th/nvim-cmp",
            "L3MON4D3/LuaSnip",
            "saadparwaiz1/cmp_luasnip",
            "rafamadriz/friendly-snippets",
        ),
        config=configure_lsp,
        description="Language-server configurations, completion and snippets",
    ),
    PluginSpec(
        "nvim-treesitter/nvim-treesitter",
        build=":TSUpdate",
        config=configure_treesitter,
        description="Syntax highlighting and indentation",
    ),
    PluginSpec(
        "nvim-telescope/telescope.nvim",
        tag="0.1.x",
        dependencies=("nvim-lua/plenary.nvim",),
        config=configure_telescope,
        description="Fuzzy finder",
    ),
    PluginSpec(
        "nvim-tree/nvim-tree.lua",
        dependencies=("nvim-tree/nvim-web-devicons",),
        config=configure_file_tree,
        description="File explorer",
    ),
    PluginSpec(
        "lukas-reineke/indent-blankline.nvim",
        main="ibl",
        opts={
            "exclude": {
                "filetypes": [
                    "help",
                    "terminal",
                    "dashboard",
                    "packer",
                    "gitcommit",
                    "NvimTree",
                    "lazy",
                ]
            }
        },
        description="Indentation guides",
    ),
    PluginSpec(
        "nvim-lualine/lualine.nvim",
        dependencies=("nvim-tree/nvim-web-devicons",),
        config=configure_statusline,
        description="Status line",
    ),
    PluginSpec(
        "akinsho/toggleterm.nvim",
        version="*",
        config=configure_terminal,
        description="Integrated terminal",
    ),
    PluginSpec(
        "lervag/vimtex",
        lazy=False,
        init=init_vimtex,
        description="LaTeX editing",
    ),
    PluginSpec(
        "folke/tokyonight.nvim",
        lazy=False,
        priority=1000,
        config=configure_colorscheme,
        description="Colorscheme",
    ),
)


__all__ = [
    "PICKER_KEYS",
    "PLUGIN_TABLE",
    "configure_colorscheme",
    "configure_file_tree",
    "configure_lsp",
    "configure_statusline",
    "configure_telescope",
    "configure_terminal",
    "configure_treesitter",
    "init_vimtex",
]
