ANALYSIS_SYSTEM_PROMPT = """\
You are an expert music analyst. Analyze the song and return a JSON object with the analysis data. \
DO NOT return a schema definition. Return actual values for each field."""

ANALYSIS_FALLBACK_SYSTEM_PROMPT = """\
You are an expert music analyst. Return ONLY a valid JSON object with the analysis data."""

ANALYSIS_PROMPT = """\
Analyze this song's structure, style, and patterns for replication:

Title: {title}
Artist: {artist}
{artist_style}
Lyrics:
{lyrics}

Provide a comprehensive analysis including:
1. Detailed song structure with sections and rhyme schemes
2. Thematic content and emotional mapping
3. Vocabulary complexity and signature words
4. Stylistic features (metaphors, alliteration, etc.)
5. Production hints (tempo, energy, key)

Focus on patterns that can be replicated to generate similar songs.

Return a JSON object with these fields:
- sections: array of {{type, line_count, rhyme_scheme}}
- overall_pattern: array of section names
- themes: array of themes
- primary_emotion: string
- emotional_arc: array of {{section, emotion, intensity}}
- vocabulary_complexity: "simple", "moderate", "complex", or "academic"
- signature_words: array of notable words
- metaphor_examples: array of metaphor examples
- metaphor_density: number 0-10
- alliteration_frequency: number 0-10
- internal_rhyme_density: number 0-10
- repetition_level: number 0-10
- suggested_tempo: string like "90-100 BPM"
- energy_level: number 1-10
- suggested_key: string (optional)
"""

ANALYSIS_FALLBACK_SUFFIX = """
IMPORTANT: Return ONLY valid JSON, no markdown or explanations."""

THEMATIC_SYSTEM_PROMPT = """\
You are a lyrical analyst. Return ONLY a valid JSON object analyzing themes and emotions."""

THEMATIC_PROMPT = """\
Analyze the themes, emotions, and vocabulary of this song. Focus on:
1. Main themes and topics
2. Emotional tone and transitions
3. Key vocabulary and signature phrases
4. Metaphors and wordplay

Title: {title}
Artist: {artist}

Lyrics:
{lyrics}

Return a JSON object with:
- themes: array of main themes
- primary_emotion: main emotional tone
- emotional_transitions: array of {{from, to, location}}
- signature_phrases: array of memorable lines or phrases
- metaphors: array of metaphors used
- wordplay: array of clever wordplay examples
- vocabulary_style: "simple", "moderate", "complex", or "technical"
"""

SONGWRITER_SYSTEM_PROMPT = """\
You are an expert lyricist capable of perfectly replicating song styles and structures.
{artist_block}
Reference Song Analysis:
- Structure: {structure}
- Rhyme Schemes: {rhyme_schemes}
- Syllables per line: {syllables:.1f} average
- Themes: {themes}
- Emotional tone: {emotion}

Your task is to generate new songs that:
1. Match the exact structure pattern
2. Use similar rhyme schemes
3. Maintain similar syllable counts per line
4. Feel authentic to the artist's style
5. Are completely original and don't copy any existing lyrics"""

SONGWRITER_ARTIST_BLOCK = """
Artist Profile:
- Name: {name}
- Style: {genres}
- Vocal: {vocal}
- Themes: {themes}
"""

GENERATION_PROMPT = """\
Generate a new song with this exact structure and style.

{variation}

Theme: {theme}
Structure to follow: {structure}

Detailed Requirements:
- Verse: {verse_lines} lines, {verse_scheme} rhyme
- Chorus: {chorus_lines} lines, {chorus_scheme} rhyme
{bridge_line}
Style Guidelines:
- Syllables per line: aim for {syllables:.0f} (±2)
- Vocabulary: {vocabulary}
- Include these stylistic elements: {signature_words}
- Emotional tone: {emotion}
- Energy level: {energy}/10
- Creativity level: {creativity}/10
{artist_requirements}{extra_instructions}
Format the output as:
TITLE: [Song Title]
---
[VERSE 1]
[lyrics]

[CHORUS]
[lyrics]

[Continue with full song structure]
---
MOOD: [Primary emotional tone]
BPM: [Suggested tempo]
KEY: [Suggested musical key]"""

GENERATION_ARTIST_REQUIREMENTS = """
Artist-specific requirements:
- Typical themes: {themes}
- Language style: {linguistic_base}
- Signature devices: {devices}
"""

TITLE_SYSTEM_PROMPT = "You are a creative songwriter. Generate catchy, memorable song titles."

TITLE_PROMPT = """\
Generate a creative song title for a song about: {theme}

Output only the title, nothing else."""
