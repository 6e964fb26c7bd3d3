"""Container reading, animation assembly, encoding and the export driver."""
