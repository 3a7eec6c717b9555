import struct
import sys
from pathlib import Path

def main():
    if len(sys.argv) != 2:
        print("Usage: corrupt_one_byte.py <MovieObject.bdmv>")
        raise SystemExit(2)

    p = Path(sys.argv[1])
    b = bytearray(p.read_bytes())
    # Header is 50 bytes, then flags(2) and command count(2) of movie object #0.
    if len(b) < 50 + 4 + 12 or struct.unpack(">H", b[52:54])[0] == 0:
        print("File has no navigation command to corrupt.")
        raise SystemExit(2)

    # Invert the operand count bits of the first navigation command. Valid
    # counts 0, 1 and 2 become 7, 6 and 5, which no decoder accepts.
    idx = 50 + 4
    b[idx] ^= 0xE0
    p.write_bytes(bytes(b))
    print(f"Corrupted 1 byte at offset {idx} in {p}")

if __name__ == "__main__":
    main()
