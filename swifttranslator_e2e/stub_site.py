"""Local stand-in for the SwiftTranslator page.

Serves a page with the same textbox label and output box classes as the real
site, and a /transliterate endpoint backed by a small rule-based
Singlish-to-Sinhala transliterator. Run it with
`python -m swifttranslator_e2e.stub_site` and point the suite at
http://127.0.0.1:5000/.
"""

import re
import time

from flask import Flask, jsonify, request
from flask_cors import CORS

HAL = "්"

# Longest keys are tried first; lookups are case sensitive (n vs N).
CONSONANTS = {
    "kh": "ඛ", "gh": "ඝ", "ch": "ච", "Ch": "ඡ", "jh": "ඣ",
    "th": "ත", "Th": "ථ", "dh": "ද", "Dh": "ධ", "ph": "ඵ", "bh": "භ",
    "sh": "ශ", "Sh": "ෂ", "GN": "ඥ", "KN": "ඤ",
    "k": "ක", "g": "ග", "c": "ච", "j": "ජ", "t": "ට", "T": "ඨ",
    "d": "ඩ", "D": "ඪ", "N": "ණ", "n": "න", "p": "ප", "P": "ඵ",
    "b": "බ", "B": "ඹ", "m": "ම", "y": "ය", "r": "ර", "l": "ල",
    "L": "ළ", "v": "ව", "w": "ව", "s": "ස", "S": "ෂ", "h": "හ",
    "f": "ෆ", "G": "ඟ",
}

# vowel -> (independent letter, sign after a consonant)
VOWELS = {
    "aae": ("ඈ", "ෑ"), "aee": ("ඈ", "ෑ"),
    "aa": ("ආ", "ා"), "ae": ("ඇ", "ැ"), "ai": ("ඓ", "ෛ"), "au": ("ඖ", "ෞ"),
    "ii": ("ඊ", "ී"), "uu": ("ඌ", "ූ"), "ee": ("ඒ", "ේ"), "oo": ("ඕ", "ෝ"),
    "a": ("අ", ""), "i": ("ඉ", "ි"), "u": ("උ", "ු"), "e": ("එ", "ෙ"), "o": ("ඔ", "ො"),
}

WORD = re.compile(r"[A-Za-z]+")


def _match(text, pos, table):
    for size in (3, 2, 1):
        piece = text[pos:pos + size]
        if len(piece) == size and piece in table:
            return piece
    return None


def transliterate_word(word):
    out = []
    i = 0
    while i < len(word):
        cons = _match(word, i, CONSONANTS)
        if cons:
            i += len(cons)
            vowel = _match(word, i, VOWELS)
            if vowel:
                out.append(CONSONANTS[cons] + VOWELS[vowel][1])
                i += len(vowel)
            else:
                out.append(CONSONANTS[cons] + HAL)
            continue
        vowel = _match(word, i, VOWELS)
        if vowel:
            out.append(VOWELS[vowel][0])
            i += len(vowel)
            continue
        out.append(word[i])
        i += 1
    return "".join(out)


def transliterate(text):
    """Transliterate Singlish to Sinhala. Words starting with a capital letter
    (names, English words, abbreviations) are kept as typed."""

    def convert(m):
        word = m.group(0)
        if word[0].isupper():
            return word
        return transliterate_word(word)

    return WORD.sub(convert, text or "")


PAGE = """<!doctype html>
<html lang="en">
<head><meta charset="utf-8"><title>Singlish to Sinhala</title></head>
<body>
  <div class="w-full h-80 p-3 rounded-lg ring-1 ring-slate-300 whitespace-pre-wrap">
    <textarea id="input" aria-label="Input Your Singlish Text Here." rows="8" cols="60"></textarea>
  </div>
  <div id="output" class="w-full h-80 p-3 rounded-lg ring-1 ring-slate-300 whitespace-pre-wrap"></div>
  <script>
    const input = document.getElementById("input");
    const output = document.getElementById("output");
    let timer = null;
    let seq = 0;
    input.addEventListener("input", () => {
      clearTimeout(timer);
      const mine = ++seq;
      const text = input.value;
      if (!text.trim()) {
        output.textContent = "";
        return;
      }
      timer = setTimeout(async () => {
        const res = await fetch("/transliterate", {
          method: "POST",
          headers: {"Content-Type": "application/json"},
          body: JSON.stringify({text: text}),
        });
        const data = await res.json();
        if (mine === seq) output.textContent = data.sinhala || "";
      }, __DEBOUNCE_MS__);
    });
  </script>
</body>
</html>
"""


def create_app(response_delay_s=0.0, debounce_ms=150):
    """Build the stub app. `response_delay_s` slows /transliterate down to
    mimic a remote service."""
    app = Flask(__name__)
    CORS(app)
    page = PAGE.replace("__DEBOUNCE_MS__", str(int(debounce_ms)))

    @app.route("/")
    def index():
        return page

    @app.route("/transliterate", methods=["POST"])
    def transliterate_endpoint():
        data = request.get_json(silent=True)
        if not data or not isinstance(data.get("text"), str):
            return jsonify({"error": "No text provided", "status": "error"}), 400

        text = data["text"]
        print(f"Transliteration request: {text!r}")
        if response_delay_s:
            time.sleep(response_delay_s)
        return jsonify({"sinhala": transliterate(text).strip(), "status": "completed"})

    return app


if __name__ == "__main__":
    create_app(response_delay_s=0.3).run(debug=True, port=5000)
