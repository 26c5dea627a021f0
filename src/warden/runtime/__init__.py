"""Session runtime: commands, queue, registry, scope, signals and coordinator."""
