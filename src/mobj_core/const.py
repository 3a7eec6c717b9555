ERRORS = {
  "E_IO": "Unable to read MovieObject.bdmv",
  "E_HEADER_TRUNCATED": "Header truncated",
  "E_BAD_MAGIC": "Header magic bytes invalid",
  "E_OBJECT_TRUNCATED": "Movie object truncated",
  "E_COMMAND_TRUNCATED": "Navigation command truncated",
  "E_BAD_OPERAND_COUNT": "Navigation command has bad operand count",
  "E_INVALID_COMMAND": "Navigation command could not be decoded",
  "E_PATCH_LOCATION": "Patch location does not exist",
  "E_PATCH_SIZE": "Patched file size changed",
}
