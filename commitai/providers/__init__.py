"""Backend drivers for commitai."""
