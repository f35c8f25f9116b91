"""Prompt templates for question synthesis, critique and answer judging.

Every critique and judge template ends by asking for a rationale followed by
"Score: X"; ``book_rag.evals.scoring`` depends on that directive. Each template
only embeds the inputs its dimension needs.
"""

SCORE_INSTRUCTION = 'First provide your reasoning, then output "Score: X" where X is 1-5.'

QA_GENERATION_PROMPT = """Based on the following text from a book, generate ONE factoid question that can be answered using only this text.
Then provide a concise answer to that question.

Text:
{context}

Generate a question that:
- Can be fully answered from the text above
- Would be useful to someone studying or understanding this book
- Is COMPLETELY CLEAR and understandable on its own without needing the source text
- Uses FULL NAMES instead of pronouns (don't use "he", "she", "they" - use actual character names)
- Is specific and focuses on facts, events, or concepts mentioned in the text

IMPORTANT: The question must be perfectly understandable by someone who hasn't read the text above.

Output format:
Question: [your question]
Answer: [your answer]"""

# --- Critique (dataset quality gate) ---------------------------------------

GROUNDEDNESS_CRITIQUE_PROMPT = """Evaluate if the following question can be fully answered using ONLY the provided context.

Context:
{context}

Question: {question}
Reference Answer: {reference}

Score 1-5:
1: Cannot be answered at all from context
2: Requires significant external knowledge
3: Partially answerable from context
4: Mostly answerable from context
5: Fully answerable from context alone

""" + SCORE_INSTRUCTION

RELEVANCE_CRITIQUE_PROMPT = """Evaluate if this question would be useful to someone reading or researching a book.

Question: {question}
Reference Answer: {reference}

Score 1-5:
1: Trivial or useless question
2: Slightly useful but very basic
3: Moderately useful
4: Quite useful and insightful
5: Highly valuable question for understanding the book

""" + SCORE_INSTRUCTION

STANDALONE_CRITIQUE_PROMPT = """Evaluate if this question is understandable and well-formed on its own, without needing the source context.

Question: {question}

Score 1-5:
1: Unintelligible or requires context to understand
2: Mostly unclear without context
3: Somewhat understandable but could be clearer
4: Clear and understandable
5: Perfectly clear and well-formed question

""" + SCORE_INSTRUCTION

# --- Judge (RAG answer scoring) --------------------------------------------

FAITHFULNESS_PROMPT = """Evaluate if the generated answer is fully grounded in the provided context. All claims in the answer must be verifiable from the context alone.

Question: {question}

Retrieved Context:
{retrieved_context}

Generated Answer: {generated}

Score 1-5:
1: Answer contains mostly hallucinated information not in context
2: Answer contains significant information not found in context
3: Answer is partially grounded but includes some unverified claims
4: Answer is mostly grounded with minor unsupported details
5: Answer is fully grounded - all claims can be verified from context

""" + SCORE_INSTRUCTION

ANSWER_RELEVANCE_PROMPT = """Evaluate how well the generated answer addresses the specific question asked. Do not judge whether the answer is factually correct.

Question: {question}

Generated Answer: {generated}

Score 1-5:
1: Answer is completely irrelevant to the question
2: Answer is mostly off-topic or addresses wrong question
3: Answer is partially relevant but misses key aspects
4: Answer is mostly relevant with minor tangents
5: Answer directly and fully addresses the question

""" + SCORE_INSTRUCTION

CORRECTNESS_PROMPT = """Evaluate how correct the generated answer is compared to the reference answer. Consider:
- Factual accuracy
- Completeness of information
- Alignment with the reference

Question: {question}

Reference Answer: {reference}

Generated Answer: {generated}

Score 1-5:
1: Completely incorrect - contradicts reference or provides wrong information
2: Mostly incorrect - contains some truth but major errors or omissions
3: Partially correct - has relevant information but missing key details
4: Mostly correct - captures main points with minor omissions
5: Fully correct - accurately and completely answers the question

""" + SCORE_INSTRUCTION

CONTEXT_RELEVANCE_PROMPT = """Evaluate how relevant the retrieved context is to answering the question. This measures retrieval quality.

Question: {question}

Retrieved Context:
{retrieved_context}

Score 1-5:
1: Context is completely irrelevant to the question
2: Context has minimal relevance to the question
3: Context is somewhat relevant but missing key information
4: Context is mostly relevant with good information
5: Context is highly relevant and contains all needed information

""" + SCORE_INSTRUCTION
