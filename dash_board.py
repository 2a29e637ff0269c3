LANDING_TXT = """
# Mind<span style="color:#ea580c">Scribe.</span>

The nonsense-free cognitive journal.
Capture thoughts. Analyze patterns. No fluff.
"""

FEED_HELP_TXT = """
## Recent Logs
Click a row to select it for analysis. Click an **AI note** cell to read the full note.
"""

FEED_EMPTY_TXT = """
**No entries yet.**
Start writing to see your insights.
"""

CHAT_EMPTY_TXT = """
### Talk to me.
I've read your journal. I can find patterns.
"""
