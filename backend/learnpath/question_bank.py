"""Static subject catalogue and fallback question sets.

These questions are served when the language model is unavailable, and they
are the answer key for submissions that arrive without a live quiz instance.
Question ids are stable; do not renumber them.
"""

from __future__ import annotations

from typing import Dict, List, NamedTuple, Optional

from .schemas import Question


class SubjectInfo(NamedTuple):
	id: str
	title: str
	description: str
	time_limit: int  # seconds
	topics: str
	questions: List[Question]


def _q(qid: str, text: str, options: List[str], correct: int, explanation: str) -> Question:
	return Question(id=qid, text=text, options=tuple(options), correct_option_index=correct, explanation=explanation)


_JAVASCRIPT = [
	_q("js-1", "What does `typeof null` return in JavaScript?",
		["\"null\"", "\"undefined\"", "\"object\"", "\"number\""], 2,
		"A long-standing quirk: typeof null is \"object\"."),
	_q("js-2", "Which keyword declares a block-scoped variable that can be reassigned?",
		["var", "let", "const", "static"], 1,
		"let is block-scoped and reassignable; const cannot be reassigned."),
	_q("js-3", "What is the result of `[1, 2, 3].map(n => n * 2)`?",
		["[1, 2, 3]", "[2, 4, 6]", "6", "undefined"], 1,
		"map returns a new array with the callback applied to every element."),
	_q("js-4", "What is a closure?",
		["A way to end a loop early",
		 "A function bundled with references to its surrounding scope",
		 "An object that cannot be modified",
		 "A syntax error in nested functions"], 1,
		"A closure keeps access to variables of the scope it was created in."),
	_q("js-5", "What does `0.1 + 0.2 === 0.3` evaluate to?",
		["true", "false", "NaN", "It throws a TypeError"], 1,
		"Floating point rounding makes 0.1 + 0.2 equal 0.30000000000000004."),
	_q("js-6", "Which method converts a JSON string into a JavaScript value?",
		["JSON.stringify", "JSON.parse", "JSON.decode", "Object.fromJSON"], 1,
		"JSON.parse parses a JSON string; JSON.stringify does the reverse."),
	_q("js-7", "What does `await` do inside an async function?",
		["Blocks the whole thread until the promise settles",
		 "Pauses the async function until the promise settles",
		 "Cancels the promise",
		 "Converts a callback into a promise"], 1,
		"await suspends only the async function; the event loop keeps running."),
	_q("js-8", "Which comparison does not perform type coercion?",
		["==", "===", "!=", "<="], 1,
		"Strict equality compares both value and type."),
	_q("js-9", "In what order do these log: `setTimeout(() => log('a'), 0); Promise.resolve().then(() => log('b')); log('c')`?",
		["a b c", "c a b", "c b a", "b c a"], 2,
		"Synchronous code runs first, then microtasks (promises), then timers."),
	_q("js-10", "What does the spread operator do in `const b = [...a]`?",
		["Creates a deep copy of a",
		 "Creates a shallow copy of a",
		 "References the same array as a",
		 "Flattens nested arrays in a"], 1,
		"Spreading copies the top-level elements only."),
]

_DATABASES = [
	_q("db-1", "What does ACID stand for?",
		["Atomicity, Consistency, Isolation, Durability",
		 "Availability, Consistency, Integrity, Durability",
		 "Atomicity, Concurrency, Integrity, Distribution",
		 "Accuracy, Consistency, Isolation, Distribution"], 0,
		"ACID describes the guarantees of database transactions."),
	_q("db-2", "Which SQL clause filters rows after aggregation?",
		["WHERE", "ORDER BY", "HAVING", "GROUP BY"], 2,
		"HAVING filters groups produced by GROUP BY; WHERE filters rows before grouping."),
	_q("db-3", "What is the main purpose of an index?",
		["Enforce foreign keys", "Speed up lookups", "Compress table data", "Encrypt columns"], 1,
		"Indexes trade write cost and storage for faster reads."),
	_q("db-4", "Which JOIN returns only rows with matches in both tables?",
		["LEFT JOIN", "INNER JOIN", "FULL OUTER JOIN", "CROSS JOIN"], 1,
		"INNER JOIN keeps only matching pairs."),
	_q("db-5", "Which normal form removes transitive dependencies?",
		["First normal form", "Second normal form", "Third normal form", "Boyce-Codd normal form only"], 2,
		"3NF requires non-key attributes to depend only on the key."),
	_q("db-6", "In MongoDB, what is a document?",
		["A table", "A BSON record of field/value pairs", "A stored procedure", "An index entry"], 1,
		"Documents are BSON objects stored in collections."),
	_q("db-7", "What does a primary key guarantee?",
		["Values are sorted", "Values are unique and not null", "Values are indexed in memory", "Values are encrypted"], 1,
		"A primary key uniquely identifies each row."),
	_q("db-8", "Which isolation level prevents dirty reads but allows non-repeatable reads?",
		["Read uncommitted", "Read committed", "Repeatable read", "Serializable"], 1,
		"Read committed only shows committed data but a row can change between reads."),
	_q("db-9", "What is the MongoDB aggregation pipeline used for?",
		["Creating indexes", "Transforming and summarizing documents in stages", "Replicating data", "Managing users"], 1,
		"Pipelines pass documents through stages such as $match and $group."),
	_q("db-10", "What is a foreign key?",
		["A key imported from another database",
		 "A column referencing the primary key of another table",
		 "An encrypted key",
		 "A key used only by NoSQL databases"], 1,
		"Foreign keys enforce referential integrity between tables."),
]

_REACT = [
	_q("react-1", "What does JSX compile to?",
		["HTML strings", "React.createElement calls (or the JSX runtime)", "Web components", "Template literals"], 1,
		"JSX is syntax sugar for element creation calls."),
	_q("react-2", "Which hook stores local component state?",
		["useEffect", "useState", "useMemo", "useRef"], 1,
		"useState returns the current value and a setter."),
	_q("react-3", "When does an effect with an empty dependency array run?",
		["On every render", "Only after the first render", "Never", "Only on unmount"], 1,
		"An empty array means the effect has no dependencies that can change."),
	_q("react-4", "Why should list items have a `key` prop?",
		["For styling", "To help React identify items between renders", "To make them focusable", "It is required by HTML"], 1,
		"Keys let reconciliation match items across renders."),
	_q("react-5", "How should state be updated from its previous value?",
		["Mutate the state variable directly",
		 "Pass an updater function to the setter",
		 "Call forceUpdate",
		 "Assign to this.state"], 1,
		"The updater form receives the latest state and avoids stale closures."),
	_q("react-6", "What are props?",
		["Mutable internal state", "Read-only inputs passed from a parent", "Global variables", "CSS properties"], 1,
		"Components must not modify their props."),
	_q("react-7", "What problem does Context solve?",
		["Styling components", "Passing data deep without prop drilling", "Server-side rendering", "Code splitting"], 1,
		"Context makes a value available to a subtree."),
	_q("react-8", "What does React.memo do?",
		["Caches API responses",
		 "Skips re-rendering when props are shallowly equal",
		 "Stores values in localStorage",
		 "Memoizes hooks"], 1,
		"memo wraps a component and compares props shallowly."),
	_q("react-9", "What is the virtual DOM?",
		["A browser API", "An in-memory representation used to compute minimal DOM updates", "A DOM polyfill", "A testing tool"], 1,
		"React diffs virtual trees to decide what to change in the real DOM."),
	_q("react-10", "Which hook returns a mutable object that persists across renders without causing re-renders?",
		["useState", "useReducer", "useRef", "useContext"], 2,
		"Changing ref.current does not trigger a render."),
]

_NODEJS = [
	_q("node-1", "What is the Node.js event loop responsible for?",
		["Compiling JavaScript", "Scheduling callbacks for completed asynchronous work", "Managing npm packages", "Rendering HTML"], 1,
		"The event loop dispatches callbacks when I/O and timers complete."),
	_q("node-2", "Which module system uses `require`?",
		["ES modules", "CommonJS", "AMD", "SystemJS"], 1,
		"require and module.exports belong to CommonJS."),
	_q("node-3", "What does Express middleware receive?",
		["Only the request", "req, res and next", "A database connection", "The routing table"], 1,
		"Middleware calls next() to pass control along the chain."),
	_q("node-4", "Which fs call should be avoided in request handlers?",
		["fs.promises.readFile", "fs.readFile", "fs.readFileSync", "fs.createReadStream"], 2,
		"Sync calls block the event loop for every request."),
	_q("node-5", "What is a Buffer?",
		["A queue of promises", "A fixed-size chunk of raw binary data", "An HTTP cache", "A logging utility"], 1,
		"Buffers hold bytes outside the V8 heap."),
	_q("node-6", "Which file lists a project's dependencies?",
		["node_modules", "package.json", "index.js", ".npmrc"], 1,
		"package.json declares dependencies and scripts."),
	_q("node-7", "What are streams useful for?",
		["Processing data piece by piece without loading it all", "Encrypting data", "Running tests", "Defining routes"], 0,
		"Streams keep memory usage flat for large payloads."),
	_q("node-8", "Which HTTP status code signals a created resource?",
		["200", "201", "204", "302"], 1,
		"201 Created is returned after a successful POST that creates a resource."),
	_q("node-9", "Where should secrets such as API keys live?",
		["In source code", "In environment variables or a secret store", "In package.json", "In client-side bundles"], 1,
		"Configuration belongs outside the codebase."),
	_q("node-10", "What does `process.nextTick` schedule?",
		["A timer", "A callback before other queued I/O callbacks", "A new thread", "A child process"], 1,
		"nextTick callbacks run before the event loop continues."),
]

SUBJECTS: Dict[str, SubjectInfo] = {
	"javascript": SubjectInfo(
		"javascript", "JavaScript Fundamentals", "Test your core JavaScript knowledge", 600,
		"variables, functions, closures, prototypes, ES6+, async/await, DOM, event loop, promises, arrays, objects",
		_JAVASCRIPT,
	),
	"databases": SubjectInfo(
		"databases", "Database Concepts", "SQL, NoSQL and data modelling essentials", 600,
		"SQL, NoSQL, MongoDB, indexing, normalization, ACID, transactions, queries, joins, aggregation, schemas",
		_DATABASES,
	),
	"react": SubjectInfo(
		"react", "React.js", "Components, hooks and state management", 600,
		"components, hooks, state, props, JSX, virtual DOM, lifecycle, context, Redux basics, React Router, performance",
		_REACT,
	),
	"nodejs": SubjectInfo(
		"nodejs", "Node.js", "Server-side JavaScript with Node and Express", 600,
		"event loop, modules, npm, Express, middleware, REST APIs, streams, buffers, file system, authentication",
		_NODEJS,
	),
}


def list_subjects() -> List[SubjectInfo]:
	return list(SUBJECTS.values())


def get_subject(subject: str) -> Optional[SubjectInfo]:
	return SUBJECTS.get((subject or "").strip().lower())


def static_questions(subject: str) -> List[Question]:
	info = get_subject(subject)
	return list(info.questions) if info else []
