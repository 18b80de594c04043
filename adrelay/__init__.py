"""Ad-analysis relay: batch reassembly, bounded history and dashboard fanout."""

__all__: list[str] = []
