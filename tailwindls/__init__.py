"""tailwindls: Tailwind CSS class completion language server."""
